from __future__ import annotations

from typing import Optional
from uuid import UUID

from app.providers.event_store import EventStore
from app.schemas import EventOut


class EventService:
    """Thin orchestration layer between the HTTP routes and an :class:`EventStore`.

    Results and errors from the store are passed through untouched.
    """

    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def create_event(self, event: EventOut) -> EventOut:
        return await self.store.create_event(event)

    async def list_events(self) -> list[EventOut]:
        return await self.store.list_events()

    async def get_event(self, event_id: UUID) -> Optional[EventOut]:
        return await self.store.get_event(event_id)
