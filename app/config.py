"""Runtime settings resolved once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


def _translate_sslmode(value: str) -> Optional[str]:
    """Translate libpq sslmode values to asyncpg-compatible flags."""

    normalized = value.strip().lower()
    if normalized in {"require", "verify-ca", "verify-full"}:
        return "true"
    if normalized == "disable":
        return "false"

    # "prefer" and "allow" have no asyncpg equivalent; leave the driver default.
    return None


def normalize_database_url(raw_url: Optional[str]) -> Optional[str]:
    """Ensure async-friendly drivers even if the URL omits them."""

    if not raw_url:
        return raw_url

    try:
        url = make_url(raw_url)
    except ArgumentError:
        # Unparsable URLs are passed on for create_async_engine to reject.
        return raw_url

    driver = url.drivername.lower()
    if driver in {"postgresql", "postgres"} or (
        driver.startswith("postgresql+") and driver != "postgresql+asyncpg"
    ):
        url = url.set(drivername="postgresql+asyncpg")
    elif driver == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")

    if url.drivername == "postgresql+asyncpg":
        query = dict(url.query)
        sslmode = query.pop("sslmode", None)
        if sslmode is not None:
            translated = _translate_sslmode(sslmode)
            if translated is not None:
                query["ssl"] = translated
        if query != url.query:
            url = url.set(query=query)

    return url.render_as_string(hide_password=False)


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _number(env: Mapping[str, str], name: str, default: float, cast=float):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return cast(default)
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative")
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str
    pool_size: int = 5
    max_overflow: int = 5
    pool_recycle: int = 1800
    request_timeout: float = 5.0
    connect_timeout: float = 5.0
    host: str = "0.0.0.0"
    port: int = 8080
    keepalive_timeout: int = 60
    allowed_origins: list[str] = field(default_factory=list)
    echo: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ``).

        ``DATABASE_URL`` is mandatory; everything else has a default.
        """

        if env is None:
            env = os.environ

        database_url = normalize_database_url((env.get("DATABASE_URL") or "").strip())
        if not database_url:
            raise ConfigError("DATABASE_URL is required")

        raw_origins = env.get("ALLOWED_ORIGINS", "").strip()
        origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

        return cls(
            database_url=database_url,
            pool_size=_number(env, "DB_POOL_SIZE", 5, int),
            max_overflow=_number(env, "DB_MAX_OVERFLOW", 5, int),
            pool_recycle=_number(env, "DB_POOL_RECYCLE_SECONDS", 1800, int),
            request_timeout=_number(env, "REQUEST_TIMEOUT_SECONDS", 5.0),
            connect_timeout=_number(env, "DB_CONNECT_TIMEOUT_SECONDS", 5.0),
            host=env.get("HOST", "0.0.0.0"),
            port=_number(env, "PORT", 8080, int),
            keepalive_timeout=_number(env, "HTTP_KEEPALIVE_SECONDS", 60, int),
            allowed_origins=origins,
            echo=_flag(env.get("SQLALCHEMY_ECHO")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


__all__ = ["ConfigError", "Settings", "normalize_database_url"]
