"""Application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from tiered_weather import __version__
from tiered_weather.api.dependencies import close_singletons
from tiered_weather.api.routes import api_router, health_router
from tiered_weather.config import get_settings
from tiered_weather.middleware.logging import LoggingMiddleware, configure_logging


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Close shared clients when the application stops."""
    yield
    await close_singletons()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    configure_logging(settings)

    app = FastAPI(
        title="Tiered Weather API",
        description="Current weather and forecasts routed by subscription tier",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router)
    app.include_router(health_router)

    # Mount Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    return app


# Create app instance for ASGI servers
app = create_app()


def run() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "tiered_weather.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
