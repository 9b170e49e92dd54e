"""Current conditions from the Open-Meteo forecast API.

API docs: https://open-meteo.com/en/docs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
import logging

import httpx

from .exceptions import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_FORECAST_BASE_URL = "https://api.open-meteo.com/v1"

# Fields requested in the "current" block
CURRENT_VARIABLES = [
    "temperature_2m",
    "relative_humidity_2m",
    "weather_code",
    "wind_speed_10m",
]

# WMO weather interpretation codes (simplified)
WEATHER_CONDITIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def weather_condition(code: Any) -> str:
    """Return the description for a WMO code, or "Unknown"."""
    try:
        return WEATHER_CONDITIONS.get(int(code), "Unknown")
    except (TypeError, ValueError):
        return "Unknown"


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float
    unit: str
    conditions: str
    wind_kph: float
    humidity: Optional[int]
    source: str = "open-meteo"


class OpenMeteoForecast:
    def __init__(self, http: httpx.AsyncClient, base_url: str = DEFAULT_FORECAST_BASE_URL) -> None:
        self._http = http
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return self.base_url

    async def fetch_current(self, lat: float, lon: float) -> CurrentConditions:
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": ",".join(CURRENT_VARIABLES),
            "wind_speed_unit": "kmh",
        }
        try:
            resp = await self._http.get(f"{self.base_url}/forecast", params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Open-Meteo weather API failed: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Open-Meteo weather API unreachable: {exc!r}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError("Invalid Open-Meteo weather response") from exc

        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict):
            raise UpstreamError("Invalid Open-Meteo weather response")

        try:
            temperature = float(current["temperature_2m"])
            wind_kph = float(current["wind_speed_10m"])
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError("Open-Meteo response is missing current readings") from exc

        humidity_raw = current.get("relative_humidity_2m")
        humidity = int(round(humidity_raw)) if isinstance(humidity_raw, (int, float)) else None

        return CurrentConditions(
            temperature=temperature,
            unit="°C",
            conditions=weather_condition(current.get("weather_code")),
            wind_kph=wind_kph,
            humidity=humidity,
        )
