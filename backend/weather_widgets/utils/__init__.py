from .errors import error_response
from .weather_cache import WeatherCache, CacheEntry
