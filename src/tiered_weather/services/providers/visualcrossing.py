"""Visual Crossing adapter (premium tier)."""

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


class VisualCrossingProvider(WeatherProvider):
    """Client for the Visual Crossing Timeline API.

    ``unitGroup=metric`` reports temperatures in Celsius, precipitation in mm
    and wind speed in km/h.
    """

    identity = ProviderIdentity.VISUALCROSSING

    def _timeline(
        self, config: ProviderConfig, lat: float, lon: float, period: str
    ) -> tuple[str, dict[str, str | float]]:
        return f"{config.base_url}/timeline/{lat},{lon}/{period}", {
            "key": config.api_key or "",
            "unitGroup": "metric",
        }

    def _current_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        return self._timeline(config, lat, lon, "today")

    def _forecast_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        return self._timeline(config, lat, lon, "next7days")

    def _parse_current(self, data: dict[str, Any]) -> WeatherSnapshot:
        current = data["currentConditions"]

        return WeatherSnapshot(
            temperature=current["temp"],
            feels_like=current["feelslike"],
            humidity=round(current["humidity"]),
            pressure=current["pressure"],
            wind_speed=kmh_to_ms(current["windspeed"]),
            wind_direction=normalize_direction(current["winddir"]),
            description=current["conditions"],
            icon=current["icon"],
            timestamp=datetime.now(UTC),
        )

    def _parse_forecast(self, data: dict[str, Any]) -> list[ForecastDay]:
        return [
            ForecastDay(
                date=day["datetime"],
                temp_max=day["tempmax"],
                temp_min=day["tempmin"],
                humidity=day["humidity"],
                # null when no precipitation is expected
                precipitation=day.get("precip") or 0.0,
                wind_speed=kmh_to_ms(day["windspeed"]),
                description=day["conditions"],
                icon=day["icon"],
            )
            for day in data["days"][:MAX_FORECAST_DAYS]
        ]
