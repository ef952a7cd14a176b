"""
Event API endpoints.
"""
from enum import Enum
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_cache, get_db
from app.schemas import event as event_schemas
from app.services.ephemeral_cache import EphemeralCache
from app.services.event_service import event_service_obj


class EventStatus(str, Enum):
    LIVE = "live"
    UPCOMING = "upcoming"
    PAST = "past"


router = APIRouter(
    prefix="/events",
    tags=["events"],
    responses={404: {"description": "Event not found"}}
)


@router.get("", response_model=event_schemas.EventListResponse)
def list_events(
        status: Optional[EventStatus] = Query(None, description="Filter by derived status"),
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1),
        db: Session = Depends(get_db),
        cache: EphemeralCache = Depends(get_cache)
):
    """
    List events, newest first.

    Status is derived from the current time:
    - live: started and not yet ended
    - upcoming: not started
    - past: ended
    """
    return event_service_obj.list_events(
        db,
        cache,
        status=status.value if status else None,
        page=page,
        limit=limit
    )


@router.get("/{event_id}", response_model=event_schemas.EventResponse)
def get_event(
        event_id: UUID,
        db: Session = Depends(get_db),
        cache: EphemeralCache = Depends(get_cache)
):
    return event_service_obj.get_event(db, cache, event_id)


@router.post("", response_model=event_schemas.EventResponse, status_code=201)
def create_event(
        event: event_schemas.EventCreate,
        db: Session = Depends(get_db),
        cache: EphemeralCache = Depends(get_cache)
):
    """Create an event. Cached event lists are invalidated."""
    return event_service_obj.create_event(db, cache, event.model_dump())
