from pydantic import BaseModel, Field
from typing import Literal, Optional


WeatherSource = Literal["open-meteo", "cache"]


class WeatherSnapshot(BaseModel):
    """One fetched or cached weather observation for a location."""

    location: str
    temperature: float
    unit: str
    conditions: str
    wind_kph: float = Field(serialization_alias="windKph")
    humidity: Optional[int] = None
    fetched_at: str = Field(serialization_alias="fetchedAt")
    source: WeatherSource

    model_config = {"frozen": True}


class CitySuggestion(BaseModel):
    name: str
    country: Optional[str] = None
    state: Optional[str] = None
    display_name: str = Field(serialization_alias="displayName")
    lat: float
    lon: float

    model_config = {"frozen": True}
