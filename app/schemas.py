# app/schemas.py
# ------------------------------------------------------------
# Pydantic v2 schemas for the events API
# ------------------------------------------------------------
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


TITLE_MAX_LENGTH = 100


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_zero_time(value: Optional[datetime]) -> bool:
    """True for a missing timestamp or the zero instant ``0001-01-01T00:00:00Z``."""

    if value is None:
        return True
    return value.replace(tzinfo=None) == datetime(1, 1, 1)


# ============================================================
# Events
# ============================================================

class EventCreate(BaseModel):
    """Incoming create payload.

    Every field is optional here; the route applies its own ordered checks so
    that clients get one specific message per failure.
    """

    title: str = Field(default="", examples=["Standup"])
    description: str = Field(default="", examples=["Daily sync"])
    start_time: Optional[datetime] = Field(default=None, examples=["2024-01-01T09:00:00Z"])
    end_time: Optional[datetime] = Field(default=None, examples=["2024-01-01T09:15:00Z"])

    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _iso_strings_only(cls, value):
        if value is not None and not isinstance(value, str):
            raise ValueError("timestamps must be ISO-8601 strings")
        return value

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def _to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        try:
            return as_utc(value)
        except OverflowError as exc:
            raise ValueError("timestamp out of range in UTC") from exc


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str = ""
    start_time: datetime
    end_time: datetime
    created_at: datetime

    @field_validator("description", mode="before")
    @classmethod
    def _coalesce_description(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("start_time", "end_time", "created_at", mode="after")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return as_utc(value)


__all__ = ["EventCreate", "EventOut", "TITLE_MAX_LENGTH", "as_utc", "is_zero_time"]
