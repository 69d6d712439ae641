from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.event import Event
from app.schemas import EventOut


class StorageError(Exception):
    """Raised when the backing store fails to execute an operation."""


class EventStore:
    """Storage capability for events: create, ordered list, lookup by id."""

    backend_name = "base"

    async def create_event(self, event: EventOut) -> EventOut:  # pragma: no cover - interface only
        raise NotImplementedError

    async def list_events(self) -> list[EventOut]:  # pragma: no cover - interface only
        raise NotImplementedError

    async def get_event(self, event_id: UUID) -> Optional[EventOut]:  # pragma: no cover
        raise NotImplementedError


def _event_columns():
    return (
        Event.id,
        Event.title,
        func.coalesce(Event.description, "").label("description"),
        Event.start_time,
        Event.end_time,
        Event.created_at,
    )


class SQLEventStore(EventStore):
    """Relational store; every operation runs a single statement."""

    backend_name = "sql"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_event(self, event: EventOut) -> EventOut:
        stmt = insert(Event).values(
            id=event.id,
            title=event.title,
            description=event.description,
            start_time=event.start_time,
            end_time=event.end_time,
            created_at=event.created_at,
        )
        try:
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"insert event {event.id}: {exc}") from exc
        return event

    async def list_events(self) -> list[EventOut]:
        stmt = select(*_event_columns()).order_by(Event.start_time.asc())
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"list events: {exc}") from exc
        return [EventOut.model_validate(dict(row._mapping)) for row in rows]

    async def get_event(self, event_id: UUID) -> Optional[EventOut]:
        stmt = select(*_event_columns()).where(Event.id == event_id)
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).first()
        except SQLAlchemyError as exc:
            raise StorageError(f"get event {event_id}: {exc}") from exc
        if row is None:
            return None
        return EventOut.model_validate(dict(row._mapping))


class InMemoryEventStore(EventStore):
    """Process-local store used by tests and for running without a database."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._events: dict[UUID, EventOut] = {}

    async def create_event(self, event: EventOut) -> EventOut:
        if event.id in self._events:
            raise StorageError(f"duplicate key value violates unique constraint: {event.id}")
        self._events[event.id] = event.model_copy()
        return event

    async def list_events(self) -> list[EventOut]:
        events = list(self._events.values())
        # sorted() is stable, so equal start times keep insertion order.
        return sorted(events, key=lambda e: e.start_time)

    async def get_event(self, event_id: UUID) -> Optional[EventOut]:
        event = self._events.get(event_id)
        return event.model_copy() if event is not None else None


__all__ = ["EventStore", "InMemoryEventStore", "SQLEventStore", "StorageError"]
