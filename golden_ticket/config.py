"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def resolve_database_url() -> str:
    """Resolve the local store connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")
    port_raw = os.getenv("PGPORT")

    if host and user and database:
        password = os.getenv("PGPASSWORD")
        sslmode = os.getenv("PGSSLMODE", "require")

        try:
            port = int(port_raw) if port_raw else 5432
        except ValueError:
            port = 5432

        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=password,
            host=host,
            port=port,
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./golden_ticket.db"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Local store
    DATABASE_URL: str = resolve_database_url()

    # Remote backend
    API_BASE_URL: str = os.getenv("API_BASE_URL", "https://governance.page/wp-json/apigold/v1")
    API_TIMEOUT_SECONDS: float = _env_float("API_TIMEOUT_SECONDS", 15.0)
    API_RESULT_TIMEOUT_SECONDS: float = _env_float("API_RESULT_TIMEOUT_SECONDS", 20.0)
    API_RETRIES: int = _env_int("API_RETRIES", 2)

    # Draw cycle
    DEFAULT_GAME: str = os.getenv("DEFAULT_GAME", "lotto649")
    CUTOFF_LEAD_MINUTES: int = _env_int("CUTOFF_LEAD_MINUTES", 60)
    POLL_INTERVAL_SECONDS: float = _env_float("POLL_INTERVAL_SECONDS", 3600.0)
    POLL_NOON_HOUR: int = _env_int("POLL_NOON_HOUR", 12)
    NEXT_DRAW_CACHE_TTL_SECONDS: float = _env_float("NEXT_DRAW_CACHE_TTL_SECONDS", 300.0)
    LOCAL_TIMEZONE: str = os.getenv("LOCAL_TIMEZONE", "")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    return DevelopmentConfig
