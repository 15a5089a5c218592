"""
Configuration helpers for the owners backend.

Settings are read once from environment variables so routers/services never
fetch os.environ directly. Tests call ``get_settings.cache_clear()`` after
changing the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    session_ttl_seconds: int
    log_level: str
    login_rate_limit: int
    login_rate_window_seconds: int
    create_tables_on_startup: bool
    trust_proxy_headers: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "").strip(),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "1800"), 1800),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "60"), 60),
        create_tables_on_startup=_bool(os.getenv("CREATE_TABLES_ON_STARTUP"), False),
        trust_proxy_headers=_bool(os.getenv("TRUST_PROXY_HEADERS"), False),
    )
