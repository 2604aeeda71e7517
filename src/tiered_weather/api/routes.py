"""API route definitions."""

from typing import Annotated, NoReturn

import structlog
from fastapi import APIRouter, Header, HTTPException, Query, status

from tiered_weather.api.dependencies import CacheDep, WeatherServiceDep
from tiered_weather.api.schemas import (
    CurrentWeatherResponse,
    ErrorDetail,
    ErrorResponse,
    ForecastResponse,
    HealthResponse,
    ReadinessResponse,
)
from tiered_weather.exceptions import (
    ConfigurationError,
    InvalidLocation,
    ProviderResponseError,
    ProviderTimeout,
    ProviderUnavailable,
    WeatherError,
)
from tiered_weather.services.router import route_tier

logger = structlog.get_logger()

# API router for weather endpoints
api_router = APIRouter(prefix="/api/v1/weather", tags=["weather"])

# Health router for health checks
health_router = APIRouter(prefix="/health", tags=["health"])

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid coordinates"},
    500: {"model": ErrorResponse, "description": "Provider misconfiguration"},
    502: {"model": ErrorResponse, "description": "Upstream API error"},
    504: {"model": ErrorResponse, "description": "Upstream timeout"},
}

LatQuery = Annotated[float, Query(description="Latitude, -90 to 90")]
LonQuery = Annotated[float, Query(description="Longitude, -180 to 180")]
TierHeader = Annotated[
    str | None,
    Header(alias="X-Subscription-Tier", description="Caller subscription tier"),
]


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
    )


def _raise_http_error(e: WeatherError, lat: float, lon: float) -> NoReturn:
    """Translate a weather layer error into an HTTP error response."""
    if isinstance(e, InvalidLocation):
        raise _error(status.HTTP_400_BAD_REQUEST, "INVALID_LOCATION", str(e)) from e

    if isinstance(e, ConfigurationError):
        logger.error("Weather provider misconfigured", lat=lat, lon=lon, error=str(e))
        raise _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "CONFIGURATION_ERROR",
            "Weather provider is not configured",
        ) from e

    if isinstance(e, ProviderTimeout):
        logger.error("Upstream timeout", lat=lat, lon=lon, provider=e.provider, error=str(e))
        raise _error(
            status.HTTP_504_GATEWAY_TIMEOUT,
            "UPSTREAM_TIMEOUT",
            f"{e.provider} API request timed out",
        ) from e

    if isinstance(e, ProviderUnavailable):
        logger.error("Upstream unreachable", lat=lat, lon=lon, provider=e.provider, error=str(e))
        raise _error(
            status.HTTP_502_BAD_GATEWAY,
            "UPSTREAM_UNAVAILABLE",
            f"{e.provider} API request failed",
        ) from e

    if isinstance(e, ProviderResponseError):
        logger.error(
            "Upstream API error",
            lat=lat,
            lon=lon,
            provider=e.provider,
            status_code=e.status_code,
            error=str(e),
        )
        raise _error(
            status.HTTP_502_BAD_GATEWAY,
            "UPSTREAM_ERROR",
            f"{e.provider} API error",
        ) from e

    logger.error("Weather request failed", lat=lat, lon=lon, error=str(e))
    raise _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "WEATHER_ERROR",
        "Failed to fetch weather data",
    ) from e


@api_router.get("/current", response_model=CurrentWeatherResponse, responses=ERROR_RESPONSES)
async def get_current_weather(
    weather_service: WeatherServiceDep,
    lat: LatQuery,
    lon: LonQuery,
    tier: TierHeader = None,
) -> CurrentWeatherResponse:
    """Get current weather for coordinates.

    The provider is chosen from the caller's subscription tier. Results are
    cached for 10 minutes.
    """
    try:
        snapshot = await weather_service.get_current_weather(lat, lon, tier)
    except WeatherError as e:
        _raise_http_error(e, lat, lon)

    return CurrentWeatherResponse(provider=route_tier(tier).value, data=snapshot)


@api_router.get("/forecast", response_model=ForecastResponse, responses=ERROR_RESPONSES)
async def get_forecast(
    weather_service: WeatherServiceDep,
    lat: LatQuery,
    lon: LonQuery,
    tier: TierHeader = None,
) -> ForecastResponse:
    """Get up to 7 days of daily forecast for coordinates.

    The provider is chosen from the caller's subscription tier. Results are
    cached for 1 hour.
    """
    try:
        days = await weather_service.get_forecast(lat, lon, tier)
    except WeatherError as e:
        _raise_http_error(e, lat, lon)

    return ForecastResponse(provider=route_tier(tier).value, data=days)


@health_router.get("/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness check - reports if the service is running."""
    return HealthResponse(status="ok")


@health_router.get("/ready", response_model=ReadinessResponse)
async def readiness(cache: CacheDep) -> ReadinessResponse:
    """Readiness check.

    Weather requests are served without the cache, so an unreachable cache
    store reports ``degraded`` instead of failing the check.
    """
    cache_status = "ok" if await cache.ping() else "unavailable"
    overall_status = "ok" if cache_status == "ok" else "degraded"

    return ReadinessResponse(status=overall_status, checks={"cache": cache_status})
