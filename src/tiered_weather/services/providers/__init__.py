"""Upstream weather provider adapters."""

from tiered_weather.services.providers.base import WeatherProvider
from tiered_weather.services.providers.openweathermap import OpenWeatherMapProvider
from tiered_weather.services.providers.visualcrossing import VisualCrossingProvider
from tiered_weather.services.providers.weatherapi import WeatherAPIProvider
from tiered_weather.services.registry import ProviderIdentity, ProviderRegistry

PROVIDER_CLASSES: dict[ProviderIdentity, type[WeatherProvider]] = {
    ProviderIdentity.OPENWEATHERMAP: OpenWeatherMapProvider,
    ProviderIdentity.WEATHERAPI: WeatherAPIProvider,
    ProviderIdentity.VISUALCROSSING: VisualCrossingProvider,
}


def build_providers(
    registry: ProviderRegistry, timeout: float
) -> dict[ProviderIdentity, WeatherProvider]:
    """Create one adapter per supported provider."""
    return {identity: cls(registry, timeout) for identity, cls in PROVIDER_CLASSES.items()}


__all__ = [
    "OpenWeatherMapProvider",
    "PROVIDER_CLASSES",
    "VisualCrossingProvider",
    "WeatherAPIProvider",
    "WeatherProvider",
    "build_providers",
]
