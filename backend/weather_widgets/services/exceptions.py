class WeatherServiceError(Exception):
    """Base class for weather lookup failures."""


class InvalidInputError(WeatherServiceError):
    """Raised when the requested location is missing or not a string."""


class NotFoundError(WeatherServiceError):
    """Raised when geocoding yields no match for the location."""


class UpstreamError(WeatherServiceError):
    """Network failure or non-success response from an upstream provider."""


class LookupFailedError(WeatherServiceError):
    """User-facing wrapper for any failure past input validation.

    The message names the requested location only; upstream detail is logged
    where the error is raised and never carried here.
    """

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(
            f"Unable to fetch weather data for {location}. Please try again later."
        )
