"""EventRepository - concrete implementation of EventRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Status changes are conditional UPDATEs: re-running them against an already
LIVE event matches zero rows, so promotion is idempotent.

Transaction ownership: the CALLER opens and commits the transaction.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.enums import EventStatus
from src.bk_event.domain.models import Event

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, name, category, venue, city, event_date, price, ticket_release_time,
    status, is_active, platform_source, is_test_event, cloned_from_id,
    original_release_time, created_at, updated_at
"""

_GET_EVENT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM events
    WHERE id = :event_id
""")

_GET_EVENTS_BY_IDS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM events
    WHERE id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
""")

_LIST_EVENTS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM events
    WHERE (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY ticket_release_time ASC, id ASC
    LIMIT :limit
""")

_FIND_PROMOTABLE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM events
    WHERE status = 'COMING_SOON'
      AND is_active = TRUE
      AND ticket_release_time <= :now
    ORDER BY ticket_release_time ASC, id ASC
""")

_PROMOTE_TO_LIVE_SQL = text("""
    UPDATE events
    SET status = 'LIVE', updated_at = NOW()
    WHERE id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
      AND status = 'COMING_SOON'
      AND is_active = TRUE
      AND ticket_release_time <= :now
    RETURNING id
""")

_RELEASE_NOW_SQL = text("""
    UPDATE events
    SET status = 'LIVE', ticket_release_time = :now, updated_at = NOW()
    WHERE id = :event_id
      AND status = 'COMING_SOON'
      AND is_active = TRUE
    RETURNING id
""")

_INSERT_EVENT_SQL = text("""
    INSERT INTO events (id, name, category, venue, city, event_date, price,
        ticket_release_time, status, is_active, platform_source,
        is_test_event, cloned_from_id, original_release_time)
    VALUES (:id, :name, :category, :venue, :city, :event_date, :price,
        :ticket_release_time, :status, :is_active, :platform_source,
        :is_test_event, :cloned_from_id, :original_release_time)
""")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_event(row: Any) -> Event:
    return Event(
        id=row.id,
        name=row.name,
        category=row.category,
        venue=row.venue,
        city=row.city,
        event_date=row.event_date,
        price=row.price,
        ticket_release_time=row.ticket_release_time,
        status=EventStatus(row.status),
        is_active=row.is_active,
        platform_source=row.platform_source,
        is_test_event=row.is_test_event,
        cloned_from_id=row.cloned_from_id,
        original_release_time=row.original_release_time,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class EventRepository:
    """Concrete implementation of EventRepositoryProtocol using raw SQL."""

    async def find_promotable(self, db: AsyncSession, now: datetime) -> list[Event]:
        result = await db.execute(_FIND_PROMOTABLE_SQL, {"now": now})
        return [_row_to_event(row) for row in result.fetchall()]

    async def promote_to_live(
        self, db: AsyncSession, event_ids: list[str], now: datetime
    ) -> int:
        if not event_ids:
            return 0
        result = await db.execute(
            _PROMOTE_TO_LIVE_SQL, {"ids_csv": ",".join(event_ids), "now": now}
        )
        return len(result.fetchall())

    async def get_by_id(self, db: AsyncSession, event_id: str) -> Event | None:
        result = await db.execute(_GET_EVENT_SQL, {"event_id": event_id})
        row = result.fetchone()
        return _row_to_event(row) if row else None

    async def get_by_ids(self, db: AsyncSession, event_ids: list[str]) -> dict[str, Event]:
        if not event_ids:
            return {}
        result = await db.execute(_GET_EVENTS_BY_IDS_SQL, {"ids_csv": ",".join(event_ids)})
        events = [_row_to_event(row) for row in result.fetchall()]
        return {e.id: e for e in events}

    async def list_events(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> list[Event]:
        result = await db.execute(_LIST_EVENTS_SQL, {"status": status, "limit": limit})
        return [_row_to_event(row) for row in result.fetchall()]

    async def save(self, db: AsyncSession, event: Event) -> None:
        await db.execute(
            _INSERT_EVENT_SQL,
            {
                "id": event.id,
                "name": event.name,
                "category": event.category,
                "venue": event.venue,
                "city": event.city,
                "event_date": event.event_date,
                "price": event.price,
                "ticket_release_time": event.ticket_release_time,
                "status": event.status.value,
                "is_active": event.is_active,
                "platform_source": event.platform_source,
                "is_test_event": event.is_test_event,
                "cloned_from_id": event.cloned_from_id,
                "original_release_time": event.original_release_time,
            },
        )

    async def release_now(self, db: AsyncSession, event_id: str, now: datetime) -> bool:
        result = await db.execute(_RELEASE_NOW_SQL, {"event_id": event_id, "now": now})
        return result.fetchone() is not None
