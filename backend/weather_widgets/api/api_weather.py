from typing import Optional

from fastapi import APIRouter, Depends, status
import logging

from .dependencies import get_weather_service
from ..schemas.weather import CitySuggestion, WeatherSnapshot
from ..services.exceptions import InvalidInputError, LookupFailedError
from ..services.weather_service import WeatherService
from ..utils.errors import error_response

router = APIRouter(tags=["weather"])
logger = logging.getLogger(__name__)


@router.get("/search", response_model=list[CitySuggestion], response_model_exclude_none=True)
async def search_cities(
    q: Optional[str] = None,
    service: WeatherService = Depends(get_weather_service),
):
    """City autocomplete. Always 200; upstream trouble yields an empty list."""
    return await service.search_cities(q)


@router.get("", response_model=WeatherSnapshot)
async def get_weather(
    location: Optional[str] = None,
    service: WeatherService = Depends(get_weather_service),
):
    """Current weather for ``location``, served from cache when fresh."""
    if not location or not location.strip():
        return error_response(
            "Location query parameter is required and must be a non-empty string",
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        return await service.get_weather_for_location(location.strip())
    except InvalidInputError as exc:
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST)
    except LookupFailedError as exc:
        return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
