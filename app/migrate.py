"""One-shot bootstrap: create the ``events`` table in the configured database."""

import asyncio
import logging
import sys

from dotenv import load_dotenv
from sqlalchemy.exc import DBAPIError, OperationalError

from app.config import ConfigError, Settings
from app.database import Database
from app.main import configure_logging

MIGRATION_TIMEOUT_SECONDS = 10.0


async def migrate(settings: Settings, timeout: float = MIGRATION_TIMEOUT_SECONDS) -> None:
    database = Database(settings)
    try:
        await database.ping(timeout)
        await asyncio.wait_for(database.init_models(), timeout=timeout)
    finally:
        await database.dispose()


def main() -> None:
    load_dotenv()
    configure_logging()
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        logging.error("Migration aborted: %s", exc)
        sys.exit(1)

    try:
        asyncio.run(migrate(settings))
    except (OperationalError, DBAPIError, OSError, asyncio.TimeoutError):
        logging.exception("Migration failed")
        sys.exit(1)
    logging.info("Migration applied successfully.")


if __name__ == "__main__":
    main()
