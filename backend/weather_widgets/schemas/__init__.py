from .weather import WeatherSnapshot, CitySuggestion, WeatherSource
from .widget import WidgetCreate, WidgetResponse
