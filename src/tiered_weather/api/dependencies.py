"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from tiered_weather.config import Settings, get_settings
from tiered_weather.services.cache import CacheStore, build_cache_store
from tiered_weather.services.providers import WeatherProvider, build_providers
from tiered_weather.services.registry import ProviderIdentity, ProviderRegistry
from tiered_weather.services.weather import WeatherService

# Singleton instances for services
_cache_store: CacheStore | None = None
_providers: dict[ProviderIdentity, WeatherProvider] | None = None


def get_cache_store(settings: Annotated[Settings, Depends(get_settings)]) -> CacheStore:
    """Get cache store instance (singleton)."""
    global _cache_store
    if _cache_store is None:
        _cache_store = build_cache_store(settings)
    return _cache_store


def get_providers(
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[ProviderIdentity, WeatherProvider]:
    """Get provider adapters sharing one registry (singleton)."""
    global _providers
    if _providers is None:
        registry = ProviderRegistry.from_settings(settings)
        _providers = build_providers(registry, settings.upstream_timeout_seconds)
    return _providers


def get_weather_service(
    settings: Annotated[Settings, Depends(get_settings)],
    cache: Annotated[CacheStore, Depends(get_cache_store)],
    providers: Annotated[dict[ProviderIdentity, WeatherProvider], Depends(get_providers)],
) -> WeatherService:
    """Get weather service instance."""
    return WeatherService(
        cache,
        providers,
        current_ttl=settings.current_cache_ttl_seconds,
        forecast_ttl=settings.forecast_cache_ttl_seconds,
    )


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
CacheDep = Annotated[CacheStore, Depends(get_cache_store)]
WeatherServiceDep = Annotated[WeatherService, Depends(get_weather_service)]


async def close_singletons() -> None:
    """Release singleton resources on shutdown."""
    if _cache_store is not None:
        await _cache_store.close()
    reset_singletons()


def reset_singletons() -> None:
    """Reset singleton instances (for testing)."""
    global _cache_store, _providers
    _cache_store = None
    _providers = None
