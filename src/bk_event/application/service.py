"""EventApplicationService - thin composition layer over EventRepository.

Reads run without an explicit transaction. Writes (create, clone, release)
commit on success and roll back on any error.
Event ingestion proper (scraping) is an external collaborator; `create_event`
is its operator-facing stand-in.
"""

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.enums import EventStatus
from src.bk_common.errors import EventNotFoundError, EventNotReleasableError
from src.bk_event.application.schemas import (
    CloneEventResponse,
    CreateEventRequest,
    EventListResponse,
    EventResponse,
)
from src.bk_event.domain.models import Event
from src.bk_event.domain.repository import EventRepositoryProtocol
from src.bk_event.infrastructure.persistence import EventRepository

logger = logging.getLogger(__name__)


class EventApplicationService:
    def __init__(self, repo: EventRepositoryProtocol | None = None) -> None:
        self._repo: EventRepositoryProtocol = repo or EventRepository()

    async def list_events(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> EventListResponse:
        events = await self._repo.list_events(db, status, limit)
        return EventListResponse(items=[EventResponse.from_domain(e) for e in events])

    async def get_event(self, db: AsyncSession, event_id: str) -> EventResponse:
        event = await self._repo.get_by_id(db, event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return EventResponse.from_domain(event)

    async def create_event(
        self, db: AsyncSession, req: CreateEventRequest, now: datetime
    ) -> EventResponse:
        event = Event(
            id=str(uuid.uuid4()),
            name=req.name,
            category=req.category,
            venue=req.venue,
            city=req.city,
            event_date=req.event_date,
            price=req.price,
            ticket_release_time=req.ticket_release_time,
            status=EventStatus.COMING_SOON,
            is_active=True,
            platform_source=req.platform_source,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._repo.save(db, event)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Event created: id=%s release=%s", event.id, event.ticket_release_time)
        return EventResponse.from_domain(event)

    async def clone_for_testing(
        self, db: AsyncSession, event_id: str, offset_minutes: int, now: datetime
    ) -> CloneEventResponse:
        """Copy an event with its release moved to now + offset, for dry runs."""
        original = await self._repo.get_by_id(db, event_id)
        if original is None:
            raise EventNotFoundError(event_id)

        test_release = now + timedelta(minutes=offset_minutes)
        clone = Event(
            id=str(uuid.uuid4()),
            name=f"[TEST] {original.name} ({offset_minutes}m)",
            category=original.category,
            venue=original.venue,
            city=original.city,
            event_date=original.event_date,
            price=original.price,
            ticket_release_time=test_release,
            # Clones always start COMING_SOON so the promotion stage is exercised too
            status=EventStatus.COMING_SOON,
            is_active=True,
            platform_source=original.platform_source,
            is_test_event=True,
            cloned_from_id=original.id,
            original_release_time=original.ticket_release_time,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._repo.save(db, clone)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Test event %s cloned from %s: release %s -> %s (%dm from now)",
            clone.id, original.id, original.ticket_release_time, test_release, offset_minutes,
        )
        return CloneEventResponse(
            test_event_id=clone.id,
            original_event_id=original.id,
            original_release_time=original.ticket_release_time.isoformat(),
            test_release_time=test_release.isoformat(),
            offset_minutes=offset_minutes,
            event_name=clone.name,
            message=f'Test event created. Tickets will "release" in {offset_minutes} minutes.',
        )

    async def release_now(self, db: AsyncSession, event_id: str, now: datetime) -> EventResponse:
        """Move an active COMING_SOON event to LIVE with release time = now."""
        try:
            released = await self._repo.release_now(db, event_id, now)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if not released:
            if await self._repo.get_by_id(db, event_id) is None:
                raise EventNotFoundError(event_id)
            raise EventNotReleasableError(event_id)

        event = await self._repo.get_by_id(db, event_id)
        if event is None:  # deleted between the two statements
            raise EventNotFoundError(event_id)
        logger.info("Event %s released early at %s", event_id, now)
        return EventResponse.from_domain(event)
