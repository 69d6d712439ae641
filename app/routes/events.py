import asyncio
import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from app.schemas import TITLE_MAX_LENGTH, EventCreate, EventOut, as_utc, is_zero_time
from app.services.event_service import EventService

router = APIRouter(tags=["events"])

_LOGGER = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 5.0


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service


def get_request_timeout(request: Request) -> float:
    return getattr(request.app.state, "request_timeout", DEFAULT_REQUEST_TIMEOUT)


def validate_event_create(payload: EventCreate) -> None:
    """Apply the create rules in order; the first failure raises a 400."""

    if payload.title == "":
        raise HTTPException(400, "title is required")
    if len(payload.title) > TITLE_MAX_LENGTH:
        raise HTTPException(400, f"title must be at most {TITLE_MAX_LENGTH} characters")
    if is_zero_time(payload.start_time) or is_zero_time(payload.end_time):
        raise HTTPException(400, "start_time and end_time are required")
    if not as_utc(payload.start_time) < as_utc(payload.end_time):
        raise HTTPException(400, "start_time must be before end_time")


@router.post("/events", response_model=EventOut, status_code=201)
async def create_event(
    request: Request,
    service: EventService = Depends(get_event_service),
    timeout: float = Depends(get_request_timeout),
):
    try:
        payload = EventCreate.model_validate_json(await request.body())
    except ValidationError:
        raise HTTPException(400, "invalid JSON body")

    validate_event_create(payload)

    event = EventOut(
        id=uuid.uuid4(),
        title=payload.title,
        description=payload.description,
        start_time=as_utc(payload.start_time),
        end_time=as_utc(payload.end_time),
        created_at=datetime.now(timezone.utc),
    )

    try:
        return await asyncio.wait_for(service.create_event(event), timeout=timeout)
    except Exception as exc:
        _LOGGER.error("Create error: %r", exc)
        raise HTTPException(500, "failed to create event") from exc


@router.get("/events", response_model=list[EventOut])
async def list_events(
    service: EventService = Depends(get_event_service),
    timeout: float = Depends(get_request_timeout),
):
    try:
        return await asyncio.wait_for(service.list_events(), timeout=timeout)
    except Exception as exc:
        _LOGGER.error("List error: %r", exc)
        raise HTTPException(500, "failed to list events") from exc


@router.get("/events/")
async def missing_event_id():
    raise HTTPException(400, "missing event id")


@router.get("/events/{event_id}", response_model=EventOut)
async def get_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
    timeout: float = Depends(get_request_timeout),
):
    try:
        parsed_id = uuid.UUID(event_id)
    except ValueError:
        raise HTTPException(400, "invalid UUID")

    try:
        event = await asyncio.wait_for(service.get_event(parsed_id), timeout=timeout)
    except Exception as exc:
        _LOGGER.error("Get error: %r", exc)
        raise HTTPException(500, "failed to get event") from exc

    if event is None:
        raise HTTPException(404, "event not found")
    return event
