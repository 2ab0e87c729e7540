from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ...ai.emotion import (
    ClassifierNotReady,
    EmotionClassifier,
    EmotionServiceError,
)
from ...ai.messages import MessageGenerator
from ...core.config import Settings, get_settings
from ...insights import (
    RISK_WINDOW_DAYS,
    compute_dashboard,
    compute_mood_summary,
    compute_reward,
    detect_risks,
    range_start,
)
from ...metrics import ACTIVITY_MINUTES, API_HITS
from ...schemas.activity import (
    ActivityCreate,
    ActivityCreateResponse,
    ActivityListResponse,
    ActivityModel,
)
from ...schemas.dashboard import DashboardResponse, RewardResponse, TypeBreakdownModel
from ...schemas.emotion import (
    EmotionAnalyzeRequest,
    EmotionAnalyzeResponse,
    EmotionScoreModel,
    MessageRequest,
    MessageResponse,
)
from ...schemas.goal import GoalModel, GoalUpsert
from ...schemas.journal import (
    JournalCreate,
    JournalCreateResponse,
    JournalEntryModel,
    JournalListResponse,
)
from ...schemas.mood import (
    MoodLogCreate,
    MoodLogCreateResponse,
    MoodLogListResponse,
    MoodLogModel,
    MoodRiskModel,
    MoodRiskResponse,
    MoodSummaryResponse,
)
from ...schemas.meditation import (
    MeditationCreate,
    MeditationCreateResponse,
    MeditationListResponse,
    MeditationModel,
)
from ...services.ratelimit import RateLimiter
from ...services.storage import (
    MOODS,
    RecordValidationError,
    StorageService,
    StoreUnavailable,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["core"])


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_emotion_classifier(request: Request) -> EmotionClassifier:
    return request.app.state.emotion_classifier


def get_message_generator(request: Request) -> MessageGenerator:
    return request.app.state.message_generator


def _require_user_id(request: Request, user_id: str | None) -> str:
    if user_id is None or not user_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="userId is required")
    request.state.user_id = user_id.strip()
    return user_id.strip()


def _check_rate(limiter: RateLimiter, action: str, subject: str, limit: int) -> None:
    if not limiter.allow(f"{action}:{subject}", limit=limit, window_seconds=60):
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="rate limited")


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


def _bad_request(exc: RecordValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


def _server_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


# -- activities ------------------------------------------------------------
@router.post(
    "/activities",
    response_model=ActivityCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_activity(
    payload: ActivityCreate,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> ActivityCreateResponse:
    if payload.user_id:
        request.state.user_id = payload.user_id
        _check_rate(limiter, "activity", payload.user_id, limit=30)
    try:
        activity = await storage.add_activity(
            user_id=payload.user_id,
            name=payload.name,
            duration=payload.duration,
            activity_type=payload.type,
            date=payload.date,
            time=payload.time,
            mood_before=payload.mood_before,
            mood_after=payload.mood_after,
        )
    except RecordValidationError as exc:
        raise _bad_request(exc) from exc
    except StoreUnavailable as exc:
        raise _server_error("failed to save activity") from exc
    ACTIVITY_MINUTES.labels(type=activity.type).inc(activity.duration)
    API_HITS.labels(endpoint="activities_post").inc()
    return ActivityCreateResponse(data=ActivityModel.model_validate(activity))


@router.get("/activities", response_model=ActivityListResponse)
async def list_activities(
    storage: StorageService = Depends(get_storage_service),
    user_id: str | None = Query(default=None, alias="userId"),
    limit: int | None = Query(default=None, ge=1, le=500),
) -> ActivityListResponse:
    try:
        if user_id:
            rows = await storage.list_activities(user_id)
            if limit is not None:
                rows = rows[:limit]
        else:
            rows = await storage.list_all_activities(limit=limit)
    except StoreUnavailable as exc:
        raise _server_error("failed to load activities") from exc
    items = [ActivityModel.model_validate(row) for row in rows]
    API_HITS.labels(endpoint="activities_get").inc()
    return ActivityListResponse(count=len(items), items=items)


# -- dashboard and rewards -------------------------------------------------
@router.get("/dashboard/{user_id}", response_model=DashboardResponse)
async def read_dashboard(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    settings: Settings = Depends(get_settings),
) -> DashboardResponse:
    owner = _require_user_id(request, user_id)
    try:
        activities = await storage.list_activities(owner)
    except StoreUnavailable as exc:
        raise _server_error("failed to load dashboard") from exc

    summary = compute_dashboard(activities)
    API_HITS.labels(endpoint="dashboard_get").inc()
    return DashboardResponse(
        total_minutes=summary.total_minutes,
        total_sessions=summary.total_sessions,
        streak=summary.streak,
        last_activity=summary.last_activity,
        last_activity_date=summary.last_activity_date,
        by_type={
            key: TypeBreakdownModel(
                minutes=bucket.minutes,
                sessions=bucket.sessions,
                progress=bucket.progress,
            )
            for key, bucket in summary.by_type.items()
        },
        recent=[
            ActivityModel.model_validate(row)
            for row in activities[: settings.dashboard_recent_limit]
        ],
    )


@router.get("/rewards/{user_id}", response_model=RewardResponse)
async def read_rewards(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> RewardResponse:
    owner = _require_user_id(request, user_id)
    try:
        activities = await storage.list_activities(owner)
    except StoreUnavailable as exc:
        raise _server_error("failed to load rewards") from exc

    summary = compute_dashboard(activities)
    reward = compute_reward(summary.total_minutes)
    API_HITS.labels(endpoint="rewards_get").inc()
    return RewardResponse(
        total_minutes=summary.total_minutes,
        total_sessions=summary.total_sessions,
        streak_days=summary.streak,
        xp=reward.xp,
        badge=reward.badge,
    )


# -- journal ---------------------------------------------------------------
@router.post(
    "/journal",
    response_model=JournalCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_journal_entry(
    payload: JournalCreate,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    classifier: EmotionClassifier = Depends(get_emotion_classifier),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> JournalCreateResponse:
    owner = _require_user_id(request, payload.user_id)
    if not payload.text or not payload.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="text is required")
    _check_rate(limiter, "journal", owner, limit=20)

    mood = await classifier.detect_mood(payload.text)
    try:
        entry = await storage.add_journal_entry(
            user_id=owner,
            text=payload.text,
            mood=mood,
            date=payload.date,
        )
    except RecordValidationError as exc:
        raise _bad_request(exc) from exc
    except StoreUnavailable as exc:
        raise _server_error("failed to save journal") from exc
    API_HITS.labels(endpoint="journal_post").inc()
    return JournalCreateResponse(
        journal=JournalEntryModel.model_validate(entry),
        detected_mood=mood,
    )


@router.get("/journal/{user_id}", response_model=JournalListResponse)
async def list_journal_entries(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> JournalListResponse:
    owner = _require_user_id(request, user_id)
    try:
        entries = await storage.list_journal_entries(owner)
    except StoreUnavailable as exc:
        raise _server_error("failed to fetch journals") from exc
    items = [JournalEntryModel.model_validate(entry) for entry in entries]
    API_HITS.labels(endpoint="journal_get").inc()
    return JournalListResponse(count=len(items), items=items)


# -- meditation ------------------------------------------------------------
@router.post(
    "/meditations",
    response_model=MeditationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_meditation(
    payload: MeditationCreate,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> MeditationCreateResponse:
    if payload.user_id:
        request.state.user_id = payload.user_id
        _check_rate(limiter, "meditation", payload.user_id, limit=30)
    try:
        session = await storage.add_meditation(
            user_id=payload.user_id,
            duration=payload.duration,
            mood_before=payload.mood_before,
            mood_after=payload.mood_after,
            date=payload.date,
        )
    except RecordValidationError as exc:
        raise _bad_request(exc) from exc
    except StoreUnavailable as exc:
        raise _server_error("failed to save meditation") from exc
    ACTIVITY_MINUTES.labels(type="Meditation").inc(session.duration)
    API_HITS.labels(endpoint="meditations_post").inc()
    return MeditationCreateResponse(meditation=MeditationModel.model_validate(session))


@router.get("/meditations/{user_id}", response_model=MeditationListResponse)
async def list_meditations(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> MeditationListResponse:
    owner = _require_user_id(request, user_id)
    try:
        sessions = await storage.list_meditations(owner)
    except StoreUnavailable as exc:
        raise _server_error("failed to fetch meditation sessions") from exc
    items = [MeditationModel.model_validate(row) for row in sessions]
    API_HITS.labels(endpoint="meditations_get").inc()
    return MeditationListResponse(count=len(items), items=items)


# -- goals -----------------------------------------------------------------
@router.post("/goals", response_model=GoalModel)
async def upsert_goal(
    payload: GoalUpsert,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> GoalModel:
    owner = _require_user_id(request, payload.user_id)
    _check_rate(limiter, "goal", owner, limit=10)
    try:
        goal = await storage.upsert_goal(
            user_id=owner,
            sessions_per_week=payload.sessions_per_week,
            minutes_per_day=payload.minutes_per_day,
        )
    except StoreUnavailable as exc:
        raise _server_error("failed to save goal") from exc
    API_HITS.labels(endpoint="goals_post").inc()
    return GoalModel.model_validate(goal)


@router.get("/goals/{user_id}", response_model=GoalModel)
async def read_goal(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> GoalModel:
    owner = _require_user_id(request, user_id)
    try:
        goal = await storage.get_goal(owner)
    except StoreUnavailable as exc:
        raise _server_error("failed to load goal") from exc
    if goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="goal not found")
    API_HITS.labels(endpoint="goals_get").inc()
    return GoalModel.model_validate(goal)


# -- mood logs -------------------------------------------------------------
@router.post(
    "/moodlogs",
    response_model=MoodLogCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_mood_log(
    payload: MoodLogCreate,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    classifier: EmotionClassifier = Depends(get_emotion_classifier),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> MoodLogCreateResponse:
    owner = _require_user_id(request, payload.user_id)
    if payload.mood not in MOODS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"mood must be one of {', '.join(MOODS)}",
        )
    if not payload.journal or not payload.journal.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="journal is required")
    _check_rate(limiter, "mood", owner, limit=20)

    sentiment = "Neutral"
    confidence: float | None = None
    try:
        result = await classifier.classify(payload.journal)
    except EmotionServiceError as exc:
        logger.warning("Mood log saved without sentiment: %s", exc)
    else:
        sentiment = result.label
        confidence = result.confidence

    try:
        log = await storage.add_mood_log(
            user_id=owner,
            mood=payload.mood,
            journal=payload.journal,
            factors=payload.factors,
            sentiment=sentiment,
            confidence=confidence,
            date=payload.date,
        )
    except RecordValidationError as exc:
        raise _bad_request(exc) from exc
    except StoreUnavailable as exc:
        raise _server_error("failed to save mood log") from exc
    API_HITS.labels(endpoint="moodlogs_post").inc()
    return MoodLogCreateResponse(data=MoodLogModel.model_validate(log))


@router.get("/moodlogs/{user_id}", response_model=MoodLogListResponse)
async def list_mood_logs(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> MoodLogListResponse:
    owner = _require_user_id(request, user_id)
    try:
        logs = await storage.list_mood_logs(owner)
    except StoreUnavailable as exc:
        raise _server_error("failed to fetch mood logs") from exc
    items = [MoodLogModel.model_validate(log) for log in logs]
    API_HITS.labels(endpoint="moodlogs_get").inc()
    return MoodLogListResponse(count=len(items), items=items)


@router.get("/moods/summary/{user_id}", response_model=MoodSummaryResponse)
async def read_mood_summary(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
    range_spec: str = Query(default="7d", alias="range", max_length=8),
) -> MoodSummaryResponse:
    owner = _require_user_id(request, user_id)
    since = range_start(range_spec, datetime.now(UTC).replace(tzinfo=None))
    try:
        logs = await storage.list_mood_logs(owner, since=since)
    except StoreUnavailable as exc:
        raise _server_error("failed to load mood summary") from exc

    summary = compute_mood_summary(logs)
    API_HITS.labels(endpoint="moods_summary").inc()
    return MoodSummaryResponse(
        range=range_spec,
        entries=summary.entries,
        mind_balance_score=summary.mind_balance_score,
        progress_milestone=summary.progress_milestone,
        weekly_moods=summary.weekly_moods,
        ai_risk_detected=summary.risk_detected,
    )


@router.get("/moods/risks/{user_id}", response_model=MoodRiskResponse)
async def read_mood_risks(
    user_id: str,
    request: Request,
    storage: StorageService = Depends(get_storage_service),
) -> MoodRiskResponse:
    owner = _require_user_id(request, user_id)
    since = datetime.now(UTC).replace(tzinfo=None) - timedelta(days=RISK_WINDOW_DAYS)
    try:
        logs = await storage.list_mood_logs(owner, since=since)
    except StoreUnavailable as exc:
        raise _server_error("failed to analyze mood risk") from exc
    API_HITS.labels(endpoint="moods_risks").inc()
    return MoodRiskResponse(
        risks=[
            MoodRiskModel(category=risk.category, message=risk.message, score=risk.score)
            for risk in detect_risks(logs)
        ]
    )


# -- AI helpers ------------------------------------------------------------
@router.post("/emotions/analyze", response_model=EmotionAnalyzeResponse)
async def analyze_emotion(
    payload: EmotionAnalyzeRequest,
    request: Request,
    classifier: EmotionClassifier = Depends(get_emotion_classifier),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> EmotionAnalyzeResponse:
    if not payload.text or not payload.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="text is required")
    _check_rate(limiter, "emotion", _client_key(request), limit=30)
    try:
        result = await classifier.classify(payload.text)
    except ClassifierNotReady as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="model not ready, try again",
        ) from exc
    except EmotionServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="emotion analysis unavailable",
        ) from exc
    API_HITS.labels(endpoint="emotions_analyze").inc()
    return EmotionAnalyzeResponse(
        emotion=result.label,
        confidence=result.confidence,
        mapped_mood=result.mood,
        scores=[EmotionScoreModel(label=item.label, score=item.score) for item in result.scores],
    )


@router.post("/messages", response_model=MessageResponse)
async def generate_message(
    payload: MessageRequest,
    request: Request,
    classifier: EmotionClassifier = Depends(get_emotion_classifier),
    generator: MessageGenerator = Depends(get_message_generator),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> MessageResponse:
    _check_rate(limiter, "message", _client_key(request), limit=20)
    mood = payload.mood or await classifier.detect_mood(payload.text)
    message = await generator.generate(mood, payload.text)
    API_HITS.labels(endpoint="messages_post").inc()
    return MessageResponse(message=message.text, mood=mood, source=message.source)
