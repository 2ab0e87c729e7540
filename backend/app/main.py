from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from backend.db import create_engine, create_session_factory, init_db

from .ai import ClassifierConfig, EmotionClassifier, GeneratorConfig, MessageGenerator
from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .middleware import RequestLoggingMiddleware
from .services.ratelimit import RateLimiter
from .services.storage import StorageService, StoreUnavailable

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure application services during startup and ensure graceful shutdown."""

    configure_logging()
    settings: Settings = get_settings()

    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, settings.version, settings.database_url)
    storage_service = StorageService(session_factory)
    emotion_classifier = EmotionClassifier(ClassifierConfig.from_settings(settings))
    message_generator = MessageGenerator(GeneratorConfig.from_settings(settings))

    app.state.settings = settings
    app.state.storage_service = storage_service
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    app.state.rate_limiter = RateLimiter()
    app.state.emotion_classifier = emotion_classifier
    app.state.message_generator = message_generator

    logger.info(
        "Healio started version=%s classifier=%s generator=%s",
        settings.version,
        "on" if emotion_classifier.available else "off",
        "on" if message_generator.available else "off",
    )

    try:
        yield
    finally:
        await emotion_classifier.aclose()
        await message_generator.aclose()
        await app.state.db_engine.dispose()


app = FastAPI(title="Healio", version=get_settings().version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.get("/healthz")
async def healthz(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "version": settings.version}


@app.get("/readyz")
async def readyz(request: Request) -> dict[str, Any]:
    storage: StorageService = request.app.state.storage_service
    classifier: EmotionClassifier = request.app.state.emotion_classifier
    generator: MessageGenerator = request.app.state.message_generator

    db_ok = True
    db_detail = "ok"
    try:
        await storage.healthcheck()
    except StoreUnavailable as exc:
        db_ok = False
        db_detail = str(exc)

    return {
        "ready": db_ok,
        "db": {"ok": db_ok, "detail": db_detail},
        "classifier": {"enabled": classifier.available},
        "generator": {"enabled": generator.available},
    }


@app.get("/", response_class=HTMLResponse)
async def root() -> str:
    return "<h1>Healio</h1><p>Healio API is running.</p>"


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
