from fastapi import Request

from ..database import get_db
from ..services.weather_service import WeatherService

__all__ = ["get_db", "get_weather_service"]


def get_weather_service(request: Request) -> WeatherService:
    """Return the service built by the application's startup hook."""
    return request.app.state.weather_service
