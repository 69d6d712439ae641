import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def sqlite_settings(tmp_path) -> Settings:
    return Settings.from_env({"DATABASE_URL": f"sqlite:///{(tmp_path / 'events.db').as_posix()}"})


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _make_event_payload(title="Standup", start=None, duration=timedelta(minutes=15), **extra):
    start = start or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    payload = {
        "title": title,
        "description": "",
        "start_time": start.isoformat(),
        "end_time": (start + duration).isoformat(),
    }
    payload.update(extra)
    return payload


@pytest.fixture
def make_event_payload():
    return _make_event_payload
