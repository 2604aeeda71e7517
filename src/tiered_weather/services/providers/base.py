"""Base class for upstream weather providers."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx
import structlog
from prometheus_client import Counter, Histogram

from tiered_weather.api.schemas import ForecastDay, WeatherSnapshot
from tiered_weather.exceptions import (
    InvalidLocation,
    ProviderResponseError,
    ProviderTimeout,
    ProviderUnavailable,
)
from tiered_weather.services.registry import ProviderConfig, ProviderIdentity, ProviderRegistry

logger = structlog.get_logger()

# Forecasts never carry more than a week of days
MAX_FORECAST_DAYS = 7

KMH_PER_MS = 3.6

# Metrics
upstream_requests = Counter(
    "upstream_requests_total",
    "Total upstream API requests",
    ["provider", "status"],
)
upstream_duration = Histogram(
    "upstream_request_duration_seconds",
    "Upstream request duration in seconds",
    ["provider"],
    buckets=[0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0],
)

# Errors raised while reading an unexpected payload shape
PAYLOAD_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


def validate_location(lat: float, lon: float) -> None:
    """Reject coordinates outside the valid range.

    Raises:
        InvalidLocation: If latitude is outside [-90, 90] or longitude outside [-180, 180]
    """
    if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
        raise InvalidLocation(lat, lon)


def kmh_to_ms(speed_kmh: float) -> float:
    """Convert a speed in km/h to m/s."""
    return float(speed_kmh) / KMH_PER_MS


def normalize_direction(degrees: float) -> int:
    """Round a wind bearing to whole degrees within [0, 359]."""
    return round(float(degrees)) % 360


class WeatherProvider(ABC):
    """Adapter translating one upstream API into canonical weather models.

    Each fetch validates coordinates, performs a single GET with a fixed
    timeout and normalizes the payload. Failures surface as
    ``ProviderUnavailable`` or ``ProviderResponseError``; nothing is retried.
    """

    identity: ClassVar[ProviderIdentity]

    def __init__(self, registry: ProviderRegistry, timeout: float) -> None:
        """Initialize provider with registry and request timeout."""
        self._registry = registry
        self._timeout = timeout

    async def fetch_current(self, lat: float, lon: float) -> WeatherSnapshot:
        """Fetch current weather for coordinates.

        Raises:
            InvalidLocation: If coordinates are out of range
            ProviderNotConfigured: If the provider has no credential
            ProviderUnavailable: If upstream cannot be reached
            ProviderResponseError: If upstream returns an error or malformed payload
        """
        validate_location(lat, lon)
        config = self._registry.resolve(self.identity)
        url, params = self._current_request(config, lat, lon)
        data = await self._get_json(url, params)
        try:
            return self._parse_current(data)
        except PAYLOAD_ERRORS as e:
            raise self._malformed(e) from e

    async def fetch_forecast(self, lat: float, lon: float) -> list[ForecastDay]:
        """Fetch daily forecast (up to 7 days) for coordinates.

        Raises the same errors as ``fetch_current``.
        """
        validate_location(lat, lon)
        config = self._registry.resolve(self.identity)
        url, params = self._forecast_request(config, lat, lon)
        data = await self._get_json(url, params)
        try:
            return self._parse_forecast(data)[:MAX_FORECAST_DAYS]
        except PAYLOAD_ERRORS as e:
            raise self._malformed(e) from e

    @abstractmethod
    def _current_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        """Build URL and query parameters for a current weather request."""

    @abstractmethod
    def _forecast_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        """Build URL and query parameters for a forecast request."""

    @abstractmethod
    def _parse_current(self, data: dict[str, Any]) -> WeatherSnapshot:
        """Normalize a current weather payload."""

    @abstractmethod
    def _parse_forecast(self, data: dict[str, Any]) -> list[ForecastDay]:
        """Normalize a forecast payload."""

    def _malformed(self, error: Exception) -> ProviderResponseError:
        logger.warning(
            "Malformed upstream payload",
            provider=self.identity.value,
            error=repr(error),
        )
        return ProviderResponseError(
            f"{self.identity.value} returned an unexpected payload: {error!r}",
            self.identity.value,
        )

    async def _get_json(self, url: str, params: dict[str, str | float]) -> dict[str, Any]:
        """Perform the upstream GET and decode its JSON body."""
        provider = self.identity.value

        with upstream_duration.labels(provider=provider).time():
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url, params=params)

            except httpx.TimeoutException as e:
                upstream_requests.labels(provider=provider, status="timeout").inc()
                raise ProviderTimeout(
                    f"{provider} request timed out after {self._timeout}s", provider
                ) from e

            except httpx.RequestError as e:
                upstream_requests.labels(provider=provider, status="error").inc()
                raise ProviderUnavailable(f"{provider} request failed: {e}", provider) from e

        if response.status_code != 200:
            upstream_requests.labels(provider=provider, status="error").inc()
            raise ProviderResponseError(
                f"{provider} returned {response.status_code}: {response.text}",
                provider,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            upstream_requests.labels(provider=provider, status="error").inc()
            raise ProviderResponseError(
                f"{provider} returned a non-JSON body", provider, status_code=200
            ) from e

        if not isinstance(data, dict):
            upstream_requests.labels(provider=provider, status="error").inc()
            raise ProviderResponseError(
                f"{provider} returned a non-object body", provider, status_code=200
            )

        upstream_requests.labels(provider=provider, status="success").inc()
        return data
