"""Application configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Server settings
    app_host: str = Field(default="0.0.0.0", description="Server bind host")
    app_port: int = Field(default=8080, description="Server bind port")

    # Upstream providers
    openweather_api_key: str | None = Field(default=None, description="OpenWeatherMap API key")
    openweather_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="OpenWeatherMap API base URL",
    )
    weatherapi_key: str | None = Field(default=None, description="WeatherAPI.com API key")
    weatherapi_base_url: str = Field(
        default="https://api.weatherapi.com/v1",
        description="WeatherAPI.com API base URL",
    )
    visualcrossing_api_key: str | None = Field(
        default=None, description="Visual Crossing API key"
    )
    visualcrossing_base_url: str = Field(
        default="https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services",
        description="Visual Crossing API base URL",
    )
    upstream_timeout_seconds: float = Field(
        default=5.0,
        description="Upstream request timeout in seconds",
        ge=0.1,
        le=30.0,
    )

    # Cache settings
    cache_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Cache store backend (memory or redis)",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL, used when cache_backend is redis",
    )
    cache_timeout_seconds: float = Field(
        default=0.5,
        ge=0.05,
        le=10.0,
        description="Connect and read timeout for Redis cache operations",
    )
    cache_max_size: int = Field(
        default=10000,
        description="Maximum entries for the in-memory cache store",
        ge=1,
        le=1000000,
    )
    current_cache_ttl_seconds: int = Field(
        default=600,
        description="Expiry of cached current weather in seconds",
        ge=1,
    )
    forecast_cache_ttl_seconds: int = Field(
        default=3600,
        description="Expiry of cached forecasts in seconds",
        ge=1,
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
