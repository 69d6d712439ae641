"""Service layer between the routes and the persistence providers."""

from .event_service import EventService

__all__ = ["EventService"]
