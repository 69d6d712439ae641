"""Persistence adapters for events."""

from .event_store import EventStore, InMemoryEventStore, SQLEventStore, StorageError

__all__ = ["EventStore", "InMemoryEventStore", "SQLEventStore", "StorageError"]
