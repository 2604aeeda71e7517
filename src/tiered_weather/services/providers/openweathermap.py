"""OpenWeatherMap adapter (baseline tier)."""

from datetime import UTC, datetime
from typing import Any

from tiered_weather.api.schemas import ForecastDay, WeatherSnapshot
from tiered_weather.services.providers.base import (
    MAX_FORECAST_DAYS,
    WeatherProvider,
    normalize_direction,
)
from tiered_weather.services.registry import ProviderConfig, ProviderIdentity


class OpenWeatherMapProvider(WeatherProvider):
    """Client for the OpenWeatherMap 2.5 API.

    Requests use ``units=metric``, so temperatures arrive in Celsius and wind
    speeds already in m/s.
    """

    identity = ProviderIdentity.OPENWEATHERMAP

    def _params(self, config: ProviderConfig, lat: float, lon: float) -> dict[str, str | float]:
        return {
            "lat": lat,
            "lon": lon,
            "appid": config.api_key or "",
            "units": "metric",
        }

    def _current_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        return f"{config.base_url}/weather", self._params(config, lat, lon)

    def _forecast_request(
        self, config: ProviderConfig, lat: float, lon: float
    ) -> tuple[str, dict[str, str | float]]:
        return f"{config.base_url}/forecast", self._params(config, lat, lon)

    def _parse_current(self, data: dict[str, Any]) -> WeatherSnapshot:
        main = data["main"]
        wind = data["wind"]
        condition = data["weather"][0]

        return WeatherSnapshot(
            temperature=main["temp"],
            feels_like=main["feels_like"],
            humidity=round(main["humidity"]),
            pressure=main["pressure"],
            wind_speed=wind["speed"],
            wind_direction=normalize_direction(wind["deg"]),
            description=condition["description"],
            icon=condition["icon"],
            timestamp=datetime.now(UTC),
        )

    def _parse_forecast(self, data: dict[str, Any]) -> list[ForecastDay]:
        """Collapse 3-hourly samples into daily summaries.

        Samples are grouped by the date part of ``dt_txt`` as sent (UTC, no
        timezone conversion). Temperatures span all samples of the day and
        rain is summed; humidity, wind and condition come from the day's
        first sample.
        """
        days: dict[str, list[dict[str, Any]]] = {}
        for sample in data["list"]:
            day = sample["dt_txt"].split(" ")[0]
            if day not in days:
                if len(days) == MAX_FORECAST_DAYS:
                    continue
                days[day] = []
            days[day].append(sample)

        forecast = []
        for day, samples in days.items():
            first = samples[0]
            temps = [sample["main"]["temp"] for sample in samples]
            precipitation = sum((sample.get("rain") or {}).get("3h", 0) for sample in samples)
            condition = first["weather"][0]

            forecast.append(
                ForecastDay(
                    date=day,
                    temp_max=max(temps),
                    temp_min=min(temps),
                    humidity=first["main"]["humidity"],
                    precipitation=precipitation,
                    wind_speed=first["wind"]["speed"],
                    description=condition["description"],
                    icon=condition["icon"],
                )
            )

        return forecast
