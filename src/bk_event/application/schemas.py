"""Pydantic schemas for bk_event API requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from src.bk_common.datetime_utils import ensure_utc
from src.bk_common.enums import EventStatus
from src.bk_common.money import minor_to_display
from src.bk_event.domain.models import Event


class CreateEventRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(default="general", max_length=64)
    venue: str = Field(default="", max_length=255)
    city: str = Field(default="", max_length=128)
    event_date: datetime | None = None
    price: int = Field(ge=0, description="Per-ticket price in minor units")
    ticket_release_time: datetime
    platform_source: str = Field(default="manual", max_length=64)

    @field_validator("ticket_release_time", "event_date")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None


class CloneEventRequest(BaseModel):
    offset_minutes: int = Field(
        default=settings.TEST_EVENT_DEFAULT_OFFSET_MINUTES, ge=0, le=24 * 60
    )


class EventResponse(BaseModel):
    id: str
    name: str
    category: str
    venue: str
    city: str
    event_date: str | None
    price: int
    price_display: str
    ticket_release_time: str
    status: EventStatus
    is_active: bool
    platform_source: str
    is_test_event: bool
    cloned_from_id: str | None

    @classmethod
    def from_domain(cls, e: Event) -> "EventResponse":
        return cls(
            id=e.id,
            name=e.name,
            category=e.category,
            venue=e.venue,
            city=e.city,
            event_date=e.event_date.isoformat() if e.event_date else None,
            price=e.price,
            price_display=minor_to_display(e.price),
            ticket_release_time=e.ticket_release_time.isoformat(),
            status=e.status,
            is_active=e.is_active,
            platform_source=e.platform_source,
            is_test_event=e.is_test_event,
            cloned_from_id=e.cloned_from_id,
        )


class EventListResponse(BaseModel):
    items: list[EventResponse]


class CloneEventResponse(BaseModel):
    test_event_id: str
    original_event_id: str
    original_release_time: str
    test_release_time: str
    offset_minutes: int
    event_name: str
    message: str
