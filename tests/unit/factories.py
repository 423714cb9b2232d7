"""Domain object factories shared by the unit tests."""

from datetime import UTC, datetime, timedelta
from typing import Any

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import AutoBookStatus, EventStatus, SeatClass
from src.bk_event.domain.models import Event

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


def make_event(**kwargs: Any) -> Event:
    defaults: dict[str, Any] = {
        "id": "evt-1",
        "name": "Coldplay Live",
        "category": "concert",
        "venue": "DY Patil Stadium",
        "city": "Mumbai",
        "event_date": NOW + timedelta(days=30),
        "price": 1000,
        "ticket_release_time": NOW - timedelta(minutes=1),
        "status": EventStatus.LIVE,
        "is_active": True,
    }
    defaults.update(kwargs)
    return Event(**defaults)


def make_auto_book(**kwargs: Any) -> AutoBook:
    defaults: dict[str, Any] = {
        "id": "ab-1",
        "user_id": "user-1",
        "event_id": "evt-1",
        "quantity": 2,
        "seat_class": SeatClass.GENERAL,
        "max_budget": 2000,
        "status": AutoBookStatus.ACTIVE,
        "created_at": NOW - timedelta(hours=1),
    }
    defaults.update(kwargs)
    return AutoBook(**defaults)
