"""Logging middleware and configuration."""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from tiered_weather.config import Settings

REQUEST_ID_HEADER = "X-Request-ID"
TIER_HEADER = "X-Subscription-Tier"

# Metrics
http_requests = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
http_duration = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def configure_logging(settings: Settings) -> None:
    """Configure structlog based on settings."""
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    log_level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _route_path(request: Request) -> str:
    """Return the matched route template, keeping metric labels bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request with logging and metrics."""
        # Honour a request ID assigned by the gateway
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            tier=request.headers.get(TIER_HEADER),
        )

        logger = structlog.get_logger()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception("Request failed with exception", duration_ms=round(duration_ms, 2))
            http_requests.labels(
                method=request.method,
                path=_route_path(request),
                status="500",
            ).inc()
            raise

        duration = time.perf_counter() - start_time
        path = _route_path(request)

        http_requests.labels(
            method=request.method,
            path=path,
            status=str(response.status_code),
        ).inc()
        http_duration.labels(method=request.method, path=path).observe(duration)

        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        response.headers[REQUEST_ID_HEADER] = request_id

        return response
