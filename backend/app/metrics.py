from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "healio_requests_total",
    "Total HTTP requests processed by Healio",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "healio_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "healio_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

API_HITS = Counter(
    "healio_api_hits_total",
    "API hits per endpoint",
    ("endpoint",),
)

AI_CALLS = Counter(
    "healio_ai_calls_total",
    "Calls to external AI services by outcome",
    ("service", "result"),
)

ACTIVITY_MINUTES = Counter(
    "healio_activity_minutes_total",
    "Minutes logged across all activities",
    ("type",),
)

__all__ = [
    "ACTIVITY_MINUTES",
    "AI_CALLS",
    "API_HITS",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
]
