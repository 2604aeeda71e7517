"""Exception hierarchy for the weather data access layer."""


class WeatherError(Exception):
    """Base exception for all weather layer errors."""


class InvalidLocation(WeatherError):
    """Raised when coordinates are outside the valid range."""

    def __init__(self, lat: float, lon: float) -> None:
        self.lat = lat
        self.lon = lon
        super().__init__(
            f"Invalid coordinates (latitude: {lat}, longitude: {lon}); "
            "latitude must be within [-90, 90] and longitude within [-180, 180]"
        )


class ConfigurationError(WeatherError):
    """Server-side configuration defect."""


class UnknownProvider(ConfigurationError):
    """Raised when a provider identity is outside the supported set."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown weather provider: {value!r}")


class UnknownWeatherKind(ConfigurationError):
    """Raised when a lookup kind is neither current nor forecast."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown weather kind: {value!r}")


class ProviderNotConfigured(ConfigurationError):
    """Raised when a provider is used without its endpoint or credential."""

    def __init__(self, provider: str, missing: str) -> None:
        self.provider = provider
        self.missing = missing
        super().__init__(f"Weather provider {provider!r} is missing {missing}")


class WeatherFetchFailed(WeatherError):
    """Base exception for failed upstream fetches."""

    def __init__(self, message: str, provider: str) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderResponseError(WeatherFetchFailed):
    """Raised when upstream returns an error status or a malformed payload."""

    def __init__(self, message: str, provider: str, status_code: int | None = None) -> None:
        super().__init__(message, provider)
        self.status_code = status_code


class ProviderUnavailable(WeatherFetchFailed):
    """Raised when upstream cannot be reached."""


class ProviderTimeout(ProviderUnavailable):
    """Raised when upstream request times out."""


class CacheUnavailable(WeatherError):
    """Raised by cache stores when the backing store fails."""
