"""Application configuration helpers."""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

ENV_PREFIX = "WALLPAPER_ADMIN_"


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _default_data_root() -> Path:
    """Return the platform specific directory used for persistent data."""

    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home()))
        return base / "WallpaperAdmin"
    return Path.home() / ".wallpaper_admin"


def _default_database_url() -> str:
    """Resolve the database URL taking overrides into account."""

    override = os.environ.get(f"{ENV_PREFIX}DATABASE_URL")
    if override:
        return override
    return f"sqlite+aiosqlite:///{_default_data_root() / 'database.sqlite3'}"


def _default_jwt_secret() -> str:
    """Return the secret key used for signing access tokens."""

    override = os.environ.get(f"{ENV_PREFIX}JWT_SECRET")
    if override:
        return override
    return secrets.token_hex(32)


def _default_cors_origins() -> list[str]:
    raw = _env("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(slots=True)
class Settings:
    """Runtime configuration loaded from environment variables."""

    app_name: str = field(default_factory=lambda: _env("APP_NAME", "Wallpaper Admin"))
    host: str = field(default_factory=lambda: _env("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(_env("PORT", "3001")))
    service_port: int = field(default_factory=lambda: int(_env("SERVICE_PORT", "3002")))
    reload: bool = field(default_factory=lambda: _env_bool("RELOAD", False))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "info"))
    database_url: str = field(default_factory=_default_database_url)
    jwt_secret: str = field(default_factory=_default_jwt_secret)
    jwt_expire_seconds: int = field(default_factory=lambda: int(_env("JWT_EXPIRE_SECONDS", "86400")))
    cookie_secure: bool = field(default_factory=lambda: _env_bool("COOKIE_SECURE", True))
    cors_origins: list[str] = field(default_factory=_default_cors_origins)
    api_prefix: str = "/api/v1/admin"

    @property
    def database_path(self) -> Path | None:
        """Return the SQLite file behind ``database_url``, if any."""

        _, sep, path = self.database_url.partition(":///")
        if not sep or not self.database_url.startswith("sqlite") or path.startswith(":memory:"):
            return None
        return Path(path).expanduser()

    def ensure_storage(self) -> None:
        """Ensure that the database directory exists."""

        path = self.database_path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    settings = Settings()
    settings.ensure_storage()
    return settings
