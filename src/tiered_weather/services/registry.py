"""Weather provider identities and connection registry."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from tiered_weather.config import Settings
from tiered_weather.exceptions import ProviderNotConfigured, UnknownProvider


class ProviderIdentity(StrEnum):
    """Supported upstream providers, ordered baseline to premium."""

    OPENWEATHERMAP = "openweathermap"
    WEATHERAPI = "weatherapi"
    VISUALCROSSING = "visualcrossing"

    @classmethod
    def parse(cls, value: "ProviderIdentity | str") -> "ProviderIdentity":
        """Coerce a value into a provider identity.

        Raises:
            UnknownProvider: If the value is not a supported provider
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise UnknownProvider(value) from e


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for a single provider."""

    identity: ProviderIdentity
    base_url: str | None
    api_key: str | None


class ProviderRegistry:
    """Read-only provider configuration, built once at startup.

    Credentials are validated lazily when a provider is resolved, so a
    deployment only needs keys for the providers it actually calls.
    """

    def __init__(self, configs: Mapping[ProviderIdentity, ProviderConfig]) -> None:
        self._configs = MappingProxyType(dict(configs))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        """Build registry from application settings."""
        return cls(
            {
                ProviderIdentity.OPENWEATHERMAP: ProviderConfig(
                    identity=ProviderIdentity.OPENWEATHERMAP,
                    base_url=settings.openweather_base_url,
                    api_key=settings.openweather_api_key,
                ),
                ProviderIdentity.WEATHERAPI: ProviderConfig(
                    identity=ProviderIdentity.WEATHERAPI,
                    base_url=settings.weatherapi_base_url,
                    api_key=settings.weatherapi_key,
                ),
                ProviderIdentity.VISUALCROSSING: ProviderConfig(
                    identity=ProviderIdentity.VISUALCROSSING,
                    base_url=settings.visualcrossing_base_url,
                    api_key=settings.visualcrossing_api_key,
                ),
            }
        )

    def resolve(self, identity: ProviderIdentity | str) -> ProviderConfig:
        """Return connection settings for a provider.

        Raises:
            UnknownProvider: If identity is not a supported provider
            ProviderNotConfigured: If the provider has no base URL or API key
        """
        identity = ProviderIdentity.parse(identity)
        config = self._configs.get(identity)
        if config is None:
            raise ProviderNotConfigured(identity.value, "configuration")
        if not config.base_url:
            raise ProviderNotConfigured(identity.value, "base URL")
        if not config.api_key:
            raise ProviderNotConfigured(identity.value, "API key")
        return config
