"""City lookup against the Open-Meteo Geocoding API.

Free, no API key required.
API docs: https://open-meteo.com/en/docs/geocoding-api

``OpenMeteoGeocoder.resolve`` turns a normalized city name into a
``Coordinate`` (first match only); ``search`` returns the raw result list
used by the autocomplete endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
import logging

import httpx

from ..schemas.weather import CitySuggestion
from .exceptions import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_GEOCODING_BASE_URL = "https://geocoding-api.open-meteo.com/v1"


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float
    resolved_name: str
    country: str


class OpenMeteoGeocoder:
    def __init__(self, http: httpx.AsyncClient, base_url: str = DEFAULT_GEOCODING_BASE_URL) -> None:
        self._http = http
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return self.base_url

    async def search(self, name: str, count: int) -> list[dict[str, Any]]:
        """Return up to ``count`` raw results; an empty list when nothing matches."""
        params = {
            "name": name,
            "count": count,
            "language": "en",
            "format": "json",
        }
        try:
            resp = await self._http.get(f"{self.base_url}/search", params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Open-Meteo geocoding failed: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Open-Meteo geocoding unreachable: {exc!r}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError("Invalid response from Open-Meteo geocoding") from exc

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    async def resolve(self, location: str) -> Coordinate:
        results = await self.search(location, count=1)
        if not results:
            raise NotFoundError(f"Location not found in Open-Meteo: {location}")

        result = results[0]
        try:
            return Coordinate(
                lat=float(result["latitude"]),
                lon=float(result["longitude"]),
                resolved_name=str(result.get("name") or ""),
                country=str(result.get("country") or ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError(f"Malformed geocoding result for {location}") from exc


def display_name(name: str, state: Optional[str], country: Optional[str]) -> str:
    """Compose "City, Region, Country", leaving out a missing region."""
    parts = [name]
    if state:
        parts.append(state)
    if country:
        parts.append(country)
    return ", ".join(parts)


def to_suggestion(result: dict[str, Any]) -> Optional[CitySuggestion]:
    """Map one geocoding result to a suggestion; None when it lacks a name or position."""
    name = result.get("name")
    lat = result.get("latitude")
    lon = result.get("longitude")
    if not name or lat is None or lon is None:
        logger.warning("Skipping incomplete geocoding result: %s", result)
        return None
    state = result.get("admin1") or None
    country = result.get("country") or None
    return CitySuggestion(
        name=name,
        country=country,
        state=state,
        display_name=display_name(name, state, country),
        lat=float(lat),
        lon=float(lon),
    )
