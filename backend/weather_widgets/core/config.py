from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Any, ClassVar
from pathlib import Path
import os


DEFAULT_WEATHER_CACHE_TTL_MS = 300_000
DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS = 3600.0


class Settings(BaseSettings):
    APP_ENV: str = "development"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Use an absolute path so running the app from different directories
    # (e.g., repo root or backend/) always resolves the same DB file.
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parents[2]
    SQLALCHEMY_DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'widgets.db'}"

    # Frontend origin(s); comma-separated when more than one.
    CORS_ORIGIN: str = "http://localhost:3000"

    # Weather lookup cache
    WEATHER_CACHE_TTL_MS: int = DEFAULT_WEATHER_CACHE_TTL_MS
    CACHE_SWEEP_INTERVAL_SECONDS: float = DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS

    # Upstream providers. Keep as plain comma-separated strings to avoid
    # JSON-only decoding of lists in BaseSettings; order is fallback order.
    GEOCODING_BASE_URLS: str = "https://geocoding-api.open-meteo.com/v1"
    FORECAST_BASE_URLS: str = "https://api.open-meteo.com/v1"
    UPSTREAM_TIMEOUT_SECONDS: float = 8.0

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("WEATHER_CACHE_TTL_MS", mode="before")
    def fallback_ttl(cls, v: Any) -> Any:
        """Junk, zero or negative values mean the default."""
        if v is None:
            return DEFAULT_WEATHER_CACHE_TTL_MS
        try:
            parsed = int(str(v).strip())
        except ValueError:
            return DEFAULT_WEATHER_CACHE_TTL_MS
        return parsed if parsed > 0 else DEFAULT_WEATHER_CACHE_TTL_MS

    @field_validator("CACHE_SWEEP_INTERVAL_SECONDS", mode="before")
    def fallback_sweep_interval(cls, v: Any) -> Any:
        """A zero, negative or unparseable interval means the hourly default."""
        if v is None:
            return DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS
        try:
            parsed = float(str(v).strip())
        except ValueError:
            return DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS
        return parsed if 0 < parsed < float("inf") else DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS

    @field_validator(
        "CORS_ORIGIN",
        "GEOCODING_BASE_URLS",
        "FORECAST_BASE_URLS",
        "APP_ENV",
        mode="before",
    )
    def strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def weather_cache_ttl_seconds(self) -> float:
        return self.WEATHER_CACHE_TTL_MS / 1000.0

    @property
    def cors_origins(self) -> list[str]:
        return split_csv(self.CORS_ORIGIN)

    @property
    def geocoding_base_urls(self) -> list[str]:
        return [u.rstrip("/") for u in split_csv(self.GEOCODING_BASE_URLS)]

    @property
    def forecast_base_urls(self) -> list[str]:
        return [u.rstrip("/") for u in split_csv(self.FORECAST_BASE_URLS)]


def split_csv(value: str) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in (value or "").split(","):
        key = item.strip()
        if not key or key in seen:
            continue
        seen.add(key)
        ordered.append(key)
    return ordered


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
