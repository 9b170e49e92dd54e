import os

# Keep the app's engine in memory so startup hooks never touch a real DB file
os.environ.setdefault("PYTEST_RUN", "1")

import httpx
import pytest

from weather_widgets.services.forecast import OpenMeteoForecast
from weather_widgets.services.geocode import OpenMeteoGeocoder
from weather_widgets.services.weather_service import WeatherService
from weather_widgets.utils.weather_cache import WeatherCache

BERLIN = {
    "name": "Berlin",
    "country": "Germany",
    "admin1": "Berlin",
    "latitude": 52.52,
    "longitude": 13.405,
}


def current_payload(code=0, temperature=21.37, wind=12.04, humidity=55):
    return {
        "current": {
            "temperature_2m": temperature,
            "relative_humidity_2m": humidity,
            "weather_code": code,
            "wind_speed_10m": wind,
        }
    }


class FakeOpenMeteo:
    """Answers geocoding and forecast requests from canned payloads.

    Set ``geocode_error``/``forecast_error`` to an exception to simulate a
    network failure, or the ``*_status`` fields for an HTTP error.
    """

    def __init__(self, geocode=None, forecast=None):
        self.geocode = {"results": [BERLIN]} if geocode is None else geocode
        self.forecast = current_payload() if forecast is None else forecast
        self.geocode_status = 200
        self.forecast_status = 200
        self.geocode_error = None
        self.forecast_error = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/search"):
            if self.geocode_error is not None:
                raise self.geocode_error
            return httpx.Response(self.geocode_status, json=self.geocode)
        if request.url.path.endswith("/forecast"):
            if self.forecast_error is not None:
                raise self.forecast_error
            return httpx.Response(self.forecast_status, json=self.forecast)
        return httpx.Response(404, json={})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def upstream():
    return FakeOpenMeteo()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return WeatherCache(ttl_seconds=300.0, clock=clock)


@pytest.fixture
def service(upstream, cache):
    http = upstream.client()
    return WeatherService(
        cache=cache,
        geocoders=[OpenMeteoGeocoder(http)],
        forecasters=[OpenMeteoForecast(http)],
    )
