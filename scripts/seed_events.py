import asyncio
import uuid
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv

from app.config import Settings
from app.database import Database
from app.providers.event_store import SQLEventStore
from app.schemas import EventOut
from app.services.event_service import EventService

SAMPLES = [
    ("Standup", "Daily sync", timedelta(hours=9), timedelta(minutes=15)),
    ("Planning", "", timedelta(hours=10), timedelta(hours=1)),
    ("Retro", "What went well, what did not", timedelta(hours=16), timedelta(minutes=45)),
]


async def main() -> None:
    """Create the events table if needed and insert a few sample events."""

    load_dotenv()
    database = Database(Settings.from_env())
    await database.init_models()
    service = EventService(SQLEventStore(database.session_factory))

    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    for title, description, offset, duration in SAMPLES:
        start = today + offset
        await service.create_event(
            EventOut(
                id=uuid.uuid4(),
                title=title,
                description=description,
                start_time=start,
                end_time=start + duration,
                created_at=datetime.now(timezone.utc),
            )
        )
    await database.dispose()
    print(f"Seeded {len(SAMPLES)} events.")


if __name__ == "__main__":
    asyncio.run(main())
