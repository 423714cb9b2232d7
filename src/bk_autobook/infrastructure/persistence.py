# src/bk_autobook/infrastructure/persistence.py
"""AutoBookRepository - raw SQL persistence implementation.

Every status change out of ACTIVE is a conditional UPDATE guarded by
`status = 'ACTIVE'` in the WHERE clause. Zero rows returned means another
pass already decided the row (or it was cancelled) and the caller no-ops.

Transaction ownership: the CALLER opens and commits the transaction.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import AutoBookStatus, FailureReason, SeatClass

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, user_id, event_id, quantity, seat_class, max_budget,
    status, failure_reason, created_at, updated_at, last_checked_at
"""

# Released events only, filtered before LIMIT so unreleased rows cannot fill a page.
# Oldest first: decides which of two duplicate requests wins.
_FIND_ACTIVE_SQL = text("""
    SELECT a.id, a.user_id, a.event_id, a.quantity, a.seat_class, a.max_budget,
           a.status, a.failure_reason, a.created_at, a.updated_at, a.last_checked_at
    FROM auto_books a
    JOIN events e ON e.id = a.event_id
    WHERE a.status = 'ACTIVE'
      AND e.ticket_release_time <= :now
    ORDER BY a.created_at ASC, a.id ASC
    LIMIT :limit
""")

_TRY_TRANSITION_SQL = text("""
    UPDATE auto_books
    SET status = :to_status,
        failure_reason = :failure_reason,
        last_checked_at = :checked_at,
        updated_at = NOW()
    WHERE id = :id AND status = 'ACTIVE'
    RETURNING id
""")

# Pairs already decided by normal evaluation; DUPLICATE_REQUEST rows never count
_FIND_DECIDED_PAIRS_SQL = text("""
    SELECT DISTINCT user_id, event_id
    FROM auto_books
    WHERE status <> 'ACTIVE'
      AND (failure_reason IS NULL OR failure_reason <> 'DUPLICATE_REQUEST')
      AND user_id = ANY(string_to_array(CAST(:user_ids_csv AS TEXT), ','))
      AND event_id = ANY(string_to_array(CAST(:event_ids_csv AS TEXT), ','))
      AND (CAST(:exclude_ids_csv AS TEXT) IS NULL
           OR NOT (id = ANY(string_to_array(CAST(:exclude_ids_csv AS TEXT), ','))))
""")

_INSERT_AUTO_BOOK_SQL = text("""
    INSERT INTO auto_books (id, user_id, event_id, quantity, seat_class,
        max_budget, status, created_at, updated_at)
    VALUES (:id, :user_id, :event_id, :quantity, :seat_class,
        :max_budget, :status, :created_at, :updated_at)
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM auto_books WHERE id = :id
""")

_GET_BY_USER_AND_EVENT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM auto_books WHERE user_id = :user_id AND event_id = :event_id
    ORDER BY created_at ASC, id ASC
    LIMIT 1
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM auto_books
    WHERE user_id = :user_id
      AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_DELETE_ACTIVE_SQL = text("""
    DELETE FROM auto_books
    WHERE id = :id AND user_id = :user_id AND status = 'ACTIVE'
    RETURNING id
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_auto_book(row: Any) -> AutoBook:
    """Convert a DB result row to an AutoBook domain object."""
    return AutoBook(
        id=row.id,
        user_id=row.user_id,
        event_id=row.event_id,
        quantity=row.quantity,
        seat_class=SeatClass(row.seat_class),
        max_budget=row.max_budget,
        status=AutoBookStatus(row.status),
        failure_reason=FailureReason(row.failure_reason) if row.failure_reason else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
        last_checked_at=row.last_checked_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AutoBookRepository:
    """Concrete implementation of AutoBookRepositoryProtocol using raw SQL."""

    async def find_active(
        self, db: AsyncSession, now: datetime, limit: int | None
    ) -> list[AutoBook]:
        # LIMIT NULL is "no limit" in PostgreSQL
        result = await db.execute(_FIND_ACTIVE_SQL, {"now": now, "limit": limit})
        return [_row_to_auto_book(row) for row in result.fetchall()]

    async def try_transition(
        self,
        db: AsyncSession,
        auto_book_id: str,
        to_status: AutoBookStatus,
        failure_reason: FailureReason | None,
        checked_at: datetime,
    ) -> bool:
        if to_status == AutoBookStatus.ACTIVE:
            raise ValueError("ACTIVE is not a transition target")
        if (to_status == AutoBookStatus.FAILED) != (failure_reason is not None):
            raise ValueError("failure_reason must be set iff to_status is FAILED")
        result = await db.execute(
            _TRY_TRANSITION_SQL,
            {
                "id": auto_book_id,
                "to_status": to_status.value,
                "failure_reason": failure_reason.value if failure_reason else None,
                "checked_at": checked_at,
            },
        )
        return result.fetchone() is not None

    async def find_decided_pairs(
        self,
        db: AsyncSession,
        pairs: set[tuple[str, str]],
        exclude_ids: set[str],
    ) -> set[tuple[str, str]]:
        if not pairs:
            return set()
        user_ids = sorted({user_id for user_id, _ in pairs})
        event_ids = sorted({event_id for _, event_id in pairs})
        result = await db.execute(
            _FIND_DECIDED_PAIRS_SQL,
            {
                "user_ids_csv": ",".join(user_ids),
                "event_ids_csv": ",".join(event_ids),
                "exclude_ids_csv": ",".join(sorted(exclude_ids)) if exclude_ids else None,
            },
        )
        # The SQL matches the cross product of users x events; keep requested pairs only
        found = {(row.user_id, row.event_id) for row in result.fetchall()}
        return found & pairs

    async def save(self, db: AsyncSession, auto_book: AutoBook) -> None:
        await db.execute(
            _INSERT_AUTO_BOOK_SQL,
            {
                "id": auto_book.id,
                "user_id": auto_book.user_id,
                "event_id": auto_book.event_id,
                "quantity": auto_book.quantity,
                "seat_class": auto_book.seat_class.value,
                "max_budget": auto_book.max_budget,
                "status": auto_book.status.value,
                "created_at": auto_book.created_at,
                "updated_at": auto_book.updated_at,
            },
        )

    async def get_by_id(self, db: AsyncSession, auto_book_id: str) -> AutoBook | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": auto_book_id})
        row = result.fetchone()
        return _row_to_auto_book(row) if row else None

    async def get_by_user_and_event(
        self, db: AsyncSession, user_id: str, event_id: str
    ) -> AutoBook | None:
        result = await db.execute(
            _GET_BY_USER_AND_EVENT_SQL, {"user_id": user_id, "event_id": event_id}
        )
        row = result.fetchone()
        return _row_to_auto_book(row) if row else None

    async def list_by_user(
        self, db: AsyncSession, user_id: str, status: str | None, limit: int
    ) -> list[AutoBook]:
        result = await db.execute(
            _LIST_BY_USER_SQL, {"user_id": user_id, "status": status, "limit": limit}
        )
        return [_row_to_auto_book(row) for row in result.fetchall()]

    async def delete_active(self, db: AsyncSession, auto_book_id: str, user_id: str) -> bool:
        result = await db.execute(_DELETE_ACTIVE_SQL, {"id": auto_book_id, "user_id": user_id})
        return result.fetchone() is not None
