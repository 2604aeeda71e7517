"""Canonical weather models and API response schemas."""

import datetime

from pydantic import BaseModel, ConfigDict, Field


class WeatherSnapshot(BaseModel):
    """Point-in-time weather observation."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(..., description="Temperature in Celsius")
    feels_like: float = Field(..., description="Feels-like temperature in Celsius")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity in %")
    pressure: float = Field(..., description="Barometric pressure in hPa")
    wind_speed: float = Field(..., ge=0, description="Wind speed in m/s")
    wind_direction: int = Field(..., ge=0, le=359, description="Wind direction in degrees")
    description: str = Field(..., description="Condition description")
    icon: str = Field(..., description="Condition icon identifier")
    timestamp: datetime.datetime = Field(..., description="Time the observation was fetched")


class ForecastDay(BaseModel):
    """Daily forecast summary."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date = Field(..., description="Calendar date")
    temp_max: float = Field(..., description="Maximum temperature in Celsius")
    temp_min: float = Field(..., description="Minimum temperature in Celsius")
    humidity: float = Field(..., ge=0, le=100, description="Humidity in %")
    precipitation: float = Field(..., ge=0, description="Precipitation in mm")
    wind_speed: float = Field(..., ge=0, description="Maximum wind speed in m/s")
    description: str = Field(..., description="Condition description")
    icon: str = Field(..., description="Condition icon identifier")


class CurrentWeatherResponse(BaseModel):
    """Current weather API response."""

    success: bool = Field(default=True)
    provider: str = Field(..., description="Provider that served the data")
    data: WeatherSnapshot


class ForecastResponse(BaseModel):
    """Forecast API response."""

    success: bool = Field(default=True)
    provider: str = Field(..., description="Provider that served the data")
    data: list[ForecastDay]


class ErrorDetail(BaseModel):
    """Error detail."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Error response."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str = Field(..., description="Readiness status")
    checks: dict[str, str] = Field(default_factory=dict, description="Component checks")
