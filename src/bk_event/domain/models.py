"""Event domain model - pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.bk_common.enums import EventStatus


@dataclass
class Event:
    id: str
    name: str
    category: str
    venue: str
    city: str
    event_date: datetime | None
    price: int  # minor units, per ticket
    ticket_release_time: datetime
    status: EventStatus
    is_active: bool
    platform_source: str = "manual"
    is_test_event: bool = False
    cloned_from_id: str | None = None
    original_release_time: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_released(self, now: datetime) -> bool:
        return self.ticket_release_time <= now

    @property
    def accepts_auto_books(self) -> bool:
        return self.is_active and self.status in (EventStatus.COMING_SOON, EventStatus.LIVE)
