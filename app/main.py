import asyncio
import logging
import sys
from typing import Optional

import uvicorn
from dotenv import load_dotenv  # load .env variables
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import DBAPIError, OperationalError

from app.config import ConfigError, Settings
from app.database import Database
from app.middleware import RequestLoggingMiddleware
from app.providers.event_store import EventStore, SQLEventStore
from app.routes.events import DEFAULT_REQUEST_TIMEOUT, router as events_router
from app.services.event_service import EventService

# ----- Load environment variables -----
load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[EventStore] = None,
) -> FastAPI:
    """Wire store -> service -> routes into a FastAPI application.

    With no ``store`` the app talks to the database named by ``settings``
    (read from the environment when omitted). Passing a store, e.g. an
    :class:`~app.providers.event_store.InMemoryEventStore`, skips the database.
    """

    if settings is None and store is None:
        settings = Settings.from_env()

    database: Optional[Database] = None
    if store is None:
        database = Database(settings)
        store = SQLEventStore(database.session_factory)

    # ----- FastAPI app -----
    app = FastAPI(
        title="Events Service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.database = database
    app.state.event_service = EventService(store)
    app.state.request_timeout = (
        settings.request_timeout if settings is not None else DEFAULT_REQUEST_TIMEOUT
    )

    # ----- CORS (enabled only if ALLOWED_ORIGINS is set) -----
    if settings is not None and settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
            max_age=86400,
        )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(events_router)

    @app.on_event("startup")
    async def on_startup():
        """Fail fast when the database is not reachable."""

        if database is None:
            logging.info("Events API started with %s store.", store.backend_name)
            return

        try:
            await database.ping(settings.connect_timeout)
        except (OperationalError, DBAPIError, OSError, asyncio.TimeoutError):
            logging.exception(
                "Database not reachable within %.1f seconds", settings.connect_timeout
            )
            raise
        logging.info("Events API started (database backend: %s).", database.backend)

    @app.on_event("shutdown")
    async def on_shutdown():
        if database is not None:
            await database.dispose()

    # ----- Health check endpoint -----
    @app.get("/health", tags=["meta"])
    async def health():
        return {"ok": True}

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        configure_logging()
        logging.error("Startup aborted: %s", exc)
        sys.exit(1)

    configure_logging(settings.log_level)
    logging.info("Listening on %s:%s", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.keepalive_timeout,
        log_config=None,
    )


if __name__ == "__main__":
    run()
