# backend/weather_widgets/main.py

import logging
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import api_weather, api_widgets
from .core.config import settings
from .core.observability import setup_logging
from .database import init_db
from .middleware.security_headers import SecurityHeadersMiddleware
from .services.cache_scheduler import CacheSweeper
from .services.weather_service import build_weather_service

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

USER_AGENT = f"weather-widgets/{settings.APP_VERSION}"

app = FastAPI(
    title="Weather Widgets API",
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
)


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Turn anything unhandled into a JSON 500 and log the traceback."""
    try:
        return await call_next(request)
    except Exception as exc:  # pragma: no cover - generic handler
        logger.exception("Unhandled error at %s: %s", request.url.path, exc)
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS origins set to: %s", settings.cors_origins)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"error": "Route not found", "path": request.url.path},
        )
    logger.error("HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail)
    return ORJSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors with details and log them for debugging."""
    errors = jsonable_encoder(exc.errors())
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Invalid request", "details": errors},
    )


@app.get("/health", tags=["health"])
async def health():
    return {
        "ok": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.APP_ENV,
        "version": settings.APP_VERSION,
    }


app.include_router(api_widgets.router, prefix="/widgets")
app.include_router(api_weather.router, prefix="/weather")


@app.on_event("startup")
def create_tables() -> None:
    init_db()


@app.on_event("startup")
async def start_weather_service() -> None:
    """Build the shared HTTP client, the weather service and its cache sweeper."""
    http = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.UPSTREAM_TIMEOUT_SECONDS),
        headers={"User-Agent": USER_AGENT},
    )
    service = build_weather_service(settings, http)
    sweeper = CacheSweeper(service.cache, settings.CACHE_SWEEP_INTERVAL_SECONDS)
    sweeper.start()

    app.state.http_client = http
    app.state.weather_service = service
    app.state.cache_sweeper = sweeper
    logger.info(
        "Weather service ready (ttl=%sms, sweep every %ss)",
        settings.WEATHER_CACHE_TTL_MS,
        settings.CACHE_SWEEP_INTERVAL_SECONDS,
    )


@app.on_event("shutdown")
async def stop_weather_service() -> None:
    """Stop the sweeper and close upstream connections."""
    sweeper = getattr(app.state, "cache_sweeper", None)
    if sweeper is not None:
        await sweeper.stop()
    http = getattr(app.state, "http_client", None)
    if http is not None:
        logger.info("Closing upstream HTTP client")
        await http.aclose()
