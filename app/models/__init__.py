"""ORM models; importing this package registers every table with ``Base``."""

from .event import Event

__all__ = ["Event"]
