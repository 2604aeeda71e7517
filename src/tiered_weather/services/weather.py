"""Weather service orchestrating cache and upstream providers."""

from collections.abc import Mapping
from enum import StrEnum

import structlog
from prometheus_client import Counter
from pydantic import TypeAdapter, ValidationError

from tiered_weather.api.schemas import ForecastDay, WeatherSnapshot
from tiered_weather.exceptions import CacheUnavailable, UnknownProvider, UnknownWeatherKind
from tiered_weather.services.cache import CacheStore
from tiered_weather.services.providers import WeatherProvider
from tiered_weather.services.providers.base import validate_location
from tiered_weather.services.registry import ProviderIdentity
from tiered_weather.services.router import SubscriptionTier, route_tier

logger = structlog.get_logger()

CURRENT_TTL_SECONDS = 600
FORECAST_TTL_SECONDS = 3600

# Metrics
cache_hits = Counter("cache_hits_total", "Total cache hits", ["kind"])
cache_misses = Counter("cache_misses_total", "Total cache misses", ["kind"])
cache_errors = Counter("cache_errors_total", "Total cache store failures", ["operation"])


class WeatherKind(StrEnum):
    """Kind of weather lookup."""

    CURRENT = "current"
    FORECAST = "forecast"

    @classmethod
    def parse(cls, value: "WeatherKind | str") -> "WeatherKind":
        """Coerce a value into a weather kind.

        Raises:
            UnknownWeatherKind: If the value is not current or forecast
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise UnknownWeatherKind(value) from e


WeatherResult = WeatherSnapshot | list[ForecastDay]

_forecast_adapter = TypeAdapter(list[ForecastDay])


def make_cache_key(kind: WeatherKind, lat: float, lon: float, provider: ProviderIdentity) -> str:
    """Create cache key from the request shape."""
    return f"weather:{kind.value}:{lat}:{lon}:{provider.value}"


def serialize(kind: WeatherKind, result: WeatherResult) -> bytes:
    """Serialize a result to JSON bytes."""
    if kind is WeatherKind.CURRENT:
        return result.model_dump_json().encode()
    return _forecast_adapter.dump_json(result)


def deserialize(kind: WeatherKind, payload: bytes) -> WeatherResult:
    """Rebuild a result from JSON bytes.

    Raises:
        ValidationError: If the payload does not match the expected model
    """
    if kind is WeatherKind.CURRENT:
        return WeatherSnapshot.model_validate_json(payload)
    return _forecast_adapter.validate_json(payload)


class WeatherService:
    """Cache-aside access to weather providers.

    The cache is an optimisation only: a miss, an unreadable entry and an
    unavailable store all fall through to the live provider, and a failed
    write never fails the request. No locks are held, so concurrent misses
    for one key may both fetch and the last write wins.
    """

    def __init__(
        self,
        cache: CacheStore,
        providers: Mapping[ProviderIdentity, WeatherProvider],
        *,
        current_ttl: int = CURRENT_TTL_SECONDS,
        forecast_ttl: int = FORECAST_TTL_SECONDS,
    ) -> None:
        """Initialize service with cache store and provider adapters."""
        self._cache = cache
        self._providers = dict(providers)
        self._ttls = {
            WeatherKind.CURRENT: current_ttl,
            WeatherKind.FORECAST: forecast_ttl,
        }

    async def get_current_weather(
        self, lat: float, lon: float, tier: SubscriptionTier | str | None = None
    ) -> WeatherSnapshot:
        """Get current weather from the provider serving the caller's tier."""
        return await self.get(WeatherKind.CURRENT, lat, lon, route_tier(tier))

    async def get_forecast(
        self, lat: float, lon: float, tier: SubscriptionTier | str | None = None
    ) -> list[ForecastDay]:
        """Get daily forecast from the provider serving the caller's tier."""
        return await self.get(WeatherKind.FORECAST, lat, lon, route_tier(tier))

    async def get(
        self,
        kind: WeatherKind | str,
        lat: float,
        lon: float,
        provider: ProviderIdentity | str,
    ) -> WeatherResult:
        """Get weather data, checking cache before calling the provider.

        Args:
            kind: current or forecast
            lat: Latitude
            lon: Longitude
            provider: Provider to fetch from on cache miss

        Returns:
            Weather snapshot for current lookups, list of forecast days otherwise

        Raises:
            UnknownWeatherKind: If kind is not current or forecast
            InvalidLocation: If coordinates are out of range
            UnknownProvider: If provider is not supported
            WeatherFetchFailed: If the provider call fails
        """
        kind = WeatherKind.parse(kind)
        validate_location(lat, lon)
        provider = ProviderIdentity.parse(provider)
        adapter = self._providers.get(provider)
        if adapter is None:
            logger.error("No adapter registered for provider", provider=provider.value)
            raise UnknownProvider(provider.value)

        key = make_cache_key(kind, lat, lon, provider)

        cached = await self._read_cache(kind, key)
        if cached is not None:
            cache_hits.labels(kind=kind.value).inc()
            logger.info(
                "Cache hit for weather request",
                kind=kind.value,
                lat=lat,
                lon=lon,
                provider=provider.value,
                cache_hit=True,
            )
            return cached

        cache_misses.labels(kind=kind.value).inc()
        logger.info(
            "Cache miss, fetching from upstream",
            kind=kind.value,
            lat=lat,
            lon=lon,
            provider=provider.value,
            cache_hit=False,
        )

        if kind is WeatherKind.CURRENT:
            result: WeatherResult = await adapter.fetch_current(lat, lon)
        else:
            result = await adapter.fetch_forecast(lat, lon)

        await self._write_cache(kind, key, result)

        return result

    async def _read_cache(self, kind: WeatherKind, key: str) -> WeatherResult | None:
        try:
            payload = await self._cache.get(key)
        except CacheUnavailable as e:
            cache_errors.labels(operation="get").inc()
            logger.warning("Cache read failed, treating as miss", key=key, error=str(e))
            return None

        if payload is None:
            return None

        try:
            return deserialize(kind, payload)
        except ValidationError as e:
            cache_errors.labels(operation="decode").inc()
            logger.warning("Discarding undecodable cache entry", key=key, error=str(e))
            return None

    async def _write_cache(self, kind: WeatherKind, key: str, result: WeatherResult) -> None:
        try:
            await self._cache.set(key, serialize(kind, result), self._ttls[kind])
        except CacheUnavailable as e:
            cache_errors.labels(operation="set").inc()
            logger.warning("Cache write failed", key=key, error=str(e))
