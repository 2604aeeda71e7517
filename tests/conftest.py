"""Test fixtures."""

import asyncio
from collections.abc import AsyncIterator, Callable
from datetime import UTC, datetime
from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from tiered_weather.api.dependencies import reset_singletons
from tiered_weather.api.schemas import ForecastDay, WeatherSnapshot
from tiered_weather.config import Settings, get_settings
from tiered_weather.main import create_app
from tiered_weather.services.cache import MemoryCacheStore
from tiered_weather.services.registry import ProviderRegistry

API_KEY_ENV = {
    "OPENWEATHER_API_KEY": "owm-test-key",
    "WEATHERAPI_KEY": "wapi-test-key",
    "VISUALCROSSING_API_KEY": "vc-test-key",
}


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        openweather_api_key="owm-test-key",
        weatherapi_key="wapi-test-key",
        visualcrossing_api_key="vc-test-key",
        upstream_timeout_seconds=1.0,
        cache_max_size=1000,
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture
def registry(settings: Settings) -> ProviderRegistry:
    """Create registry with all providers configured."""
    return ProviderRegistry.from_settings(settings)


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    """Create empty in-memory cache store."""
    return MemoryCacheStore(max_size=100)


@pytest.fixture
def snapshot() -> WeatherSnapshot:
    """Create a canonical current weather snapshot."""
    return WeatherSnapshot(
        temperature=15.5,
        feels_like=14.2,
        humidity=72,
        pressure=1013.0,
        wind_speed=4.1,
        wind_direction=230,
        description="light rain",
        icon="10d",
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def forecast_days() -> list[ForecastDay]:
    """Create a canonical two-day forecast."""
    return [
        ForecastDay(
            date="2024-05-01",
            temp_max=18.0,
            temp_min=9.5,
            humidity=70,
            precipitation=1.2,
            wind_speed=5.0,
            description="light rain",
            icon="10d",
        ),
        ForecastDay(
            date="2024-05-02",
            temp_max=21.0,
            temp_min=11.0,
            humidity=55,
            precipitation=0.0,
            wind_speed=3.0,
            description="clear sky",
            icon="01d",
        ),
    ]


def _owm_sample(
    dt_txt: str,
    temp: float,
    humidity: int = 60,
    wind_speed: float = 3.0,
    rain: float | None = None,
    description: str = "clear sky",
) -> dict[str, Any]:
    """Build one 3-hourly OpenWeatherMap forecast sample."""
    sample: dict[str, Any] = {
        "dt_txt": dt_txt,
        "main": {"temp": temp, "humidity": humidity},
        "wind": {"speed": wind_speed},
        "weather": [{"description": description, "icon": "01d"}],
    }
    if rain is not None:
        sample["rain"] = {"3h": rain}
    return sample


@pytest.fixture
def owm_sample() -> Callable[..., dict[str, Any]]:
    """Provide a builder for OpenWeatherMap forecast samples."""
    return _owm_sample


@pytest.fixture
def owm_current_payload() -> dict[str, Any]:
    """OpenWeatherMap current weather payload."""
    return {
        "main": {"temp": 15.5, "feels_like": 14.2, "humidity": 72, "pressure": 1013},
        "wind": {"speed": 4.1, "deg": 230},
        "weather": [{"description": "light rain", "icon": "10d"}],
    }


@pytest.fixture
def weatherapi_current_payload() -> dict[str, Any]:
    """WeatherAPI.com current weather payload."""
    return {
        "current": {
            "temp_c": 21.0,
            "feelslike_c": 22.3,
            "humidity": 48,
            "pressure_mb": 1009.0,
            "wind_kph": 36.0,
            "wind_degree": 90,
            "condition": {"text": "Sunny", "icon": "//cdn.weatherapi.com/113.png"},
        }
    }


@pytest.fixture
def weatherapi_forecast_payload() -> dict[str, Any]:
    """WeatherAPI.com forecast payload with 3 days."""
    return {
        "forecast": {
            "forecastday": [
                {
                    "date": f"2024-05-0{i}",
                    "day": {
                        "maxtemp_c": 20.0 + i,
                        "mintemp_c": 10.0 + i,
                        "avghumidity": 50.0,
                        "totalprecip_mm": 0.5 * i,
                        "maxwind_kph": 36.0,
                        "condition": {"text": "Cloudy", "icon": "//cdn.weatherapi.com/119.png"},
                    },
                }
                for i in range(1, 4)
            ]
        }
    }


@pytest.fixture
def visualcrossing_current_payload() -> dict[str, Any]:
    """Visual Crossing timeline payload for today."""
    return {
        "currentConditions": {
            "temp": 8.4,
            "feelslike": 5.9,
            "humidity": 81.6,
            "pressure": 1021.0,
            "windspeed": 36.0,
            "winddir": 359.7,
            "conditions": "Overcast",
            "icon": "cloudy",
        }
    }


@pytest.fixture
def visualcrossing_forecast_payload() -> dict[str, Any]:
    """Visual Crossing timeline payload with 8 days."""
    return {
        "days": [
            {
                "datetime": f"2024-05-0{i}",
                "tempmax": 15.0 + i,
                "tempmin": 5.0 + i,
                "humidity": 65.5,
                "precip": None if i % 2 else 2.5,
                "windspeed": 18.0,
                "conditions": "Partially cloudy",
                "icon": "partly-cloudy-day",
            }
            for i in range(1, 9)
        ]
    }


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch):
    """Create test application."""
    for name, value in API_KEY_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("LOG_FORMAT", "text")
    # Reset singletons before each test
    reset_singletons()
    # Clear settings cache
    get_settings.cache_clear()
    yield create_app()
    reset_singletons()
    get_settings.cache_clear()


@pytest.fixture
def client(app) -> TestClient:
    """Create test client."""
    return TestClient(app)


async def _swallow(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Accept a connection and never answer it."""
    try:
        await reader.read()
    except ConnectionError:
        pass
    finally:
        writer.close()


@pytest_asyncio.fixture
async def silent_redis_url() -> AsyncIterator[str]:
    """Start a TCP server that accepts connections but never replies."""
    server = await asyncio.start_server(_swallow, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield f"redis://127.0.0.1:{port}/0"
    server.close()
    await server.wait_closed()
