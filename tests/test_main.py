import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app, run
from app.migrate import migrate
from app.providers.event_store import InMemoryEventStore, SQLEventStore


def test_health_endpoint():
    client = TestClient(create_app(store=InMemoryEventStore()))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_create_app_without_store_uses_sql_backend(sqlite_settings):
    app = create_app(sqlite_settings)
    assert isinstance(app.state.event_service.store, SQLEventStore)
    assert app.state.request_timeout == sqlite_settings.request_timeout


def test_full_round_trip_against_sqlite(sqlite_settings, make_event_payload):
    asyncio.run(migrate(sqlite_settings))
    base = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    with TestClient(create_app(sqlite_settings)) as client:
        assert client.get("/events").json() == []

        created = []
        for title, hours in (("Late", 4), ("Early", 0), ("Middle", 2)):
            response = client.post(
                "/events",
                json=make_event_payload(title=title, start=base + timedelta(hours=hours)),
            )
            assert response.status_code == 201
            created.append(response.json())

        listed = client.get("/events").json()
        assert [item["title"] for item in listed] == ["Early", "Middle", "Late"]

        fetched = client.get(f"/events/{created[0]['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Late"
        assert fetched.json()["id"] == created[0]["id"]

        assert client.get(f"/events/{uuid.uuid4()}").status_code == 404


def test_startup_fails_when_database_unreachable(tmp_path):
    missing_dir = tmp_path / "does-not-exist"
    settings = Settings.from_env({"DATABASE_URL": f"sqlite:///{(missing_dir / 'x.db').as_posix()}"})
    app = create_app(settings)

    with pytest.raises(Exception):
        with TestClient(app):
            pass


def test_migrate_creates_events_table(sqlite_settings):
    asyncio.run(migrate(sqlite_settings))
    # Running it twice leaves the existing table alone.
    asyncio.run(migrate(sqlite_settings))

    with TestClient(create_app(sqlite_settings)) as client:
        assert client.get("/events").status_code == 200


def test_requests_are_logged(caplog):
    caplog.set_level(logging.INFO, logger="app.requests")
    client = TestClient(create_app(store=InMemoryEventStore()))

    response = client.get("/events/not-a-uuid")

    assert response.status_code == 400
    messages = [r.getMessage() for r in caplog.records if r.name == "app.requests"]
    assert any(m.startswith("GET /events/not-a-uuid 400") for m in messages)


def test_run_exits_without_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(SystemExit) as excinfo:
        run()
    assert excinfo.value.code == 1
