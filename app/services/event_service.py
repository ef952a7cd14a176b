import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.cache_config import CacheKeys, CacheTTL
from app.core.config import settings
from app.core.exceptions import EventNotFound, ValidationError
from app.models.event import Event
from app.services.ephemeral_cache import EphemeralCache
from app.services.validators import score_validator
from app.utils.pagination import get_pagination_metadata, paginate, validate_pagination_params

logger = logging.getLogger(__name__)

EVENT_STATUSES = ("live", "upcoming", "past")


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored date is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_event_status(event: Event, now: Optional[datetime] = None) -> str:
    """'live' while running, 'upcoming' before the start, 'past' after the end."""
    now = as_utc(now or datetime.now(timezone.utc))
    start = as_utc(event.start_date)
    end = as_utc(event.end_date)

    if start <= now <= end:
        return "live"
    if now < start:
        return "upcoming"
    return "past"


class EventService:

    def list_events(
            self,
            db: Session,
            cache: EphemeralCache,
            status: Optional[str] = None,
            page: int = 1,
            limit: int = 20
    ) -> Dict[str, Any]:
        """Paginated events, newest start date first, optionally filtered by status."""
        if status is not None and status not in EVENT_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(EVENT_STATUSES)}")
        validate_pagination_params(page, limit, settings.PAGINATION_MAX_LIMIT)

        return cache.get_or_compute(
            CacheKeys.events(status, page, limit),
            lambda: self._query_events(db, status, page, limit),
            ttl=CacheTTL.EVENTS
        )

    def get_event(self, db: Session, cache: EphemeralCache, event_id: Any) -> Dict[str, Any]:
        event_id = score_validator.validate_identifier(event_id, "event_id")
        return cache.get_or_compute(
            CacheKeys.event(event_id),
            lambda: self._load_event(db, event_id),
            ttl=CacheTTL.EVENTS
        )

    def create_event(self, db: Session, cache: EphemeralCache, data: Dict[str, Any]) -> Dict[str, Any]:
        start_date = as_utc(data["start_date"])
        end_date = as_utc(data["end_date"])
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        event = Event(
            title=data["title"],
            description=data.get("description") or "",
            location=data.get("location"),
            start_date=start_date,
            end_date=end_date,
            max_participants=data.get("max_participants")
        )
        db.add(event)
        db.commit()
        db.refresh(event)

        # Every paginated list variant may now be stale
        removed = cache.invalidate_pattern("events:")
        logger.info(f"Created event {event.id} '{event.title}', invalidated {removed} cached lists")
        return self._serialize(event)

    def _query_events(self, db: Session, status: Optional[str], page: int, limit: int) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        query = db.query(Event)

        if status == "live":
            query = query.filter(and_(Event.start_date <= now, Event.end_date >= now))
        elif status == "upcoming":
            query = query.filter(Event.start_date > now)
        elif status == "past":
            query = query.filter(Event.end_date < now)

        total = query.count()
        events = paginate(query.order_by(Event.start_date.desc(), Event.id.asc()), page, limit).all()

        return {
            "data": [self._serialize(event, now) for event in events],
            "pagination": get_pagination_metadata(total, page, limit)
        }

    def _load_event(self, db: Session, event_id: str) -> Dict[str, Any]:
        event = db.query(Event).filter(Event.id == event_id).first()
        if not event:
            raise EventNotFound(f"Event {event_id} not found")
        return self._serialize(event)

    def _serialize(self, event: Event, now: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            "id": event.id,
            "title": event.title,
            "description": event.description,
            "location": event.location,
            "start_date": as_utc(event.start_date),
            "end_date": as_utc(event.end_date),
            "max_participants": event.max_participants,
            "status": calculate_event_status(event, now)
        }


event_service_obj = EventService()
