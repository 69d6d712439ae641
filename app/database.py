# app/database.py
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import Settings

_LOGGER = logging.getLogger(__name__)

Base = declarative_base()


def _build_engine(settings: Settings) -> AsyncEngine:
    options = dict(echo=settings.echo, pool_pre_ping=True)
    # SQLite uses a per-file pool that does not accept the sizing options.
    if make_url(settings.database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_recycle=settings.pool_recycle,
            pool_timeout=settings.request_timeout,
        )
    return create_async_engine(settings.database_url, **options)


def _build_session_factory(bind_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


class Database:
    """Engine and session factory pair built from :class:`Settings`."""

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None) -> None:
        self.settings = settings
        self.engine = engine or _build_engine(settings)
        self.session_factory = _build_session_factory(self.engine)

    @property
    def backend(self) -> str:
        return self.engine.dialect.name

    async def ping(self, timeout: Optional[float] = None) -> None:
        """Run ``SELECT 1``; raises on failure or when ``timeout`` elapses."""

        async def _select_one() -> None:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

        await asyncio.wait_for(_select_one(), timeout=timeout or self.settings.connect_timeout)

    async def init_models(self) -> None:
        """
        Import the model modules so they register with Base, then create tables.
        Safe to run repeatedly; existing tables are left alone.
        """

        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        _LOGGER.info("Database tables ensured on %s backend", self.backend)

    async def dispose(self) -> None:
        await self.engine.dispose()


__all__ = ["Base", "Database"]
