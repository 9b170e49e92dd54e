import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Sequence

import httpx

from ..core.config import Settings
from ..schemas.weather import CitySuggestion, WeatherSnapshot
from ..utils.weather_cache import WeatherCache
from .exceptions import InvalidInputError, LookupFailedError
from .forecast import CurrentConditions, OpenMeteoForecast
from .geocode import Coordinate, OpenMeteoGeocoder, to_suggestion
from .location import cache_key, normalize_location
from .providers import first_success

logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2
SEARCH_RESULT_COUNT = 5


def _utc_now_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def round_one_decimal(value: float) -> float:
    """Round to one decimal with ties away from zero (2.25 -> 2.3, -2.25 -> -2.3)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class WeatherService:
    """Cached current-weather lookups and city autocomplete."""

    def __init__(
        self,
        cache: WeatherCache,
        geocoders: Sequence[OpenMeteoGeocoder],
        forecasters: Sequence[OpenMeteoForecast],
    ) -> None:
        self.cache = cache
        self.geocoders = list(geocoders)
        self.forecasters = list(forecasters)

    async def resolve(self, location: str) -> Coordinate:
        return await first_success(
            self.geocoders, lambda g: g.resolve(location), "geocoding"
        )

    async def fetch_current(self, lat: float, lon: float) -> CurrentConditions:
        return await first_success(
            self.forecasters, lambda f: f.fetch_current(lat, lon), "forecast"
        )

    async def get_weather_for_location(self, location: Any) -> WeatherSnapshot:
        """Return current weather for ``location``, from cache when fresh.

        Raises InvalidInputError for a missing or non-string location and
        LookupFailedError for any failure while resolving or fetching.
        """
        if not location or not isinstance(location, str):
            raise InvalidInputError("Location is required and must be a string")

        normalized = normalize_location(location)
        if not normalized:
            raise InvalidInputError("Location is required and must be a string")
        key = cache_key(normalized)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Returning cached weather for %s", normalized)
            return cached

        logger.info("Fetching fresh weather data for %s", normalized)
        try:
            coord = await self.resolve(normalized)
            current = await self.fetch_current(coord.lat, coord.lon)
        except Exception as exc:
            logger.error("Weather fetch failed for %s: %s", normalized, exc, exc_info=True)
            raise LookupFailedError(normalized) from exc

        snapshot = WeatherSnapshot(
            location=coord.resolved_name or normalized,
            temperature=round_one_decimal(current.temperature),
            unit=current.unit,
            conditions=current.conditions,
            wind_kph=round_one_decimal(current.wind_kph),
            humidity=current.humidity,
            fetched_at=_utc_now_iso(),
            source=current.source,
        )
        self.cache.put(key, snapshot)
        return snapshot

    async def search_cities(self, query: Any) -> list[CitySuggestion]:
        """Autocomplete suggestions; degrades to an empty list on any failure."""
        if not query or not isinstance(query, str) or len(query.strip()) < SEARCH_MIN_LENGTH:
            return []

        search_query = query.strip()
        try:
            results = await first_success(
                self.geocoders,
                lambda g: g.search(search_query, count=SEARCH_RESULT_COUNT),
                "city search",
            )
            suggestions: list[CitySuggestion] = []
            for result in results:
                suggestion = to_suggestion(result)
                if suggestion is not None:
                    suggestions.append(suggestion)
            return suggestions
        except Exception as exc:
            logger.warning("City search failed for %r: %s", search_query, exc)
            return []


def build_weather_service(
    settings: Settings,
    http: httpx.AsyncClient,
    cache: Optional[WeatherCache] = None,
) -> WeatherService:
    """Compose the service from configured provider URLs."""
    if cache is None:
        cache = WeatherCache(ttl_seconds=settings.weather_cache_ttl_seconds)
    geocoders = [OpenMeteoGeocoder(http, url) for url in settings.geocoding_base_urls]
    forecasters = [OpenMeteoForecast(http, url) for url in settings.forecast_base_urls]
    return WeatherService(cache=cache, geocoders=geocoders, forecasters=forecasters)
