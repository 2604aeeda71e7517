"""WeatherAPI.com adapter (mid tier)."""

from datetime import UTC, datetime
from typing import Any

from tiered_weather.api.schemas import ForecastDay, WeatherSnapshot
from tiered_weather.services.providers.base import (
    MAX_FORECAST_DAYS,
    WeatherProvider,
    kmh_to_ms,
    normalize_direction,
)
from tiered_weather.services.registry import ProviderConfig, ProviderIdentity


class WeatherAPIProvider(WeatherProvider):
    """Client for the WeatherAPI.com v1 API. Wind speeds arrive in km/h."""

    identity = ProviderIdentity.WEATHERAPI

    def _current_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        return f"{config.base_url}/current.json", {
            "key": config.api_key or "",
            "q": f"{lat},{lon}",
        }

    def _forecast_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        return f"{config.base_url}/forecast.json", {
            "key": config.api_key or "",
            "q": f"{lat},{lon}",
            "days": MAX_FORECAST_DAYS,
        }

    def _parse_current(self, data: dict[str, Any]) -> WeatherSnapshot:
        current = data["current"]
        condition = current["condition"]

        return WeatherSnapshot(
            temperature=current["temp_c"],
            feels_like=current["feelslike_c"],
            humidity=round(current["humidity"]),
            pressure=current["pressure_mb"],
            wind_speed=kmh_to_ms(current["wind_kph"]),
            wind_direction=normalize_direction(current["wind_degree"]),
            description=condition["text"],
            icon=condition["icon"],
            timestamp=datetime.now(UTC),
        )

    def _parse_forecast(self, data: dict[str, Any]) -> list[ForecastDay]:
        return [
            ForecastDay(
                date=entry["date"],
                temp_max=entry["day"]["maxtemp_c"],
                temp_min=entry["day"]["mintemp_c"],
                humidity=entry["day"]["avghumidity"],
                precipitation=entry["day"]["totalprecip_mm"],
                wind_speed=kmh_to_ms(entry["day"]["maxwind_kph"]),
                description=entry["day"]["condition"]["text"],
                icon=entry["day"]["condition"]["icon"],
            )
            for entry in data["forecast"]["forecastday"][:MAX_FORECAST_DAYS]
        ]
