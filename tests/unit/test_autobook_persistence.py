# tests/unit/test_autobook_persistence.py
"""Unit tests for AutoBookRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.bk_autobook.infrastructure.persistence import AutoBookRepository
from src.bk_common.enums import AutoBookStatus, FailureReason, SeatClass
from tests.unit.factories import make_auto_book

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def _make_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "ab-1")
    row.user_id = kwargs.get("user_id", "user-1")
    row.event_id = kwargs.get("event_id", "evt-1")
    row.quantity = kwargs.get("quantity", 2)
    row.seat_class = kwargs.get("seat_class", "PREMIUM")
    row.max_budget = kwargs.get("max_budget", 2000)
    row.status = kwargs.get("status", "ACTIVE")
    row.failure_reason = kwargs.get("failure_reason")
    row.created_at = NOW
    row.updated_at = NOW
    row.last_checked_at = None
    return row


def _result(fetchone=None, fetchall=None):
    result = MagicMock()
    result.fetchone.return_value = fetchone
    result.fetchall.return_value = fetchall or []
    return result


@pytest.fixture
def db():
    return MagicMock()


class TestFindActive:
    @pytest.mark.asyncio
    async def test_maps_rows(self, db):
        db.execute = AsyncMock(return_value=_result(fetchall=[_make_row(), _make_row(id="ab-2")]))
        items = await AutoBookRepository().find_active(db, NOW, None)
        assert [ab.id for ab in items] == ["ab-1", "ab-2"]
        assert items[0].seat_class == SeatClass.PREMIUM
        assert items[0].status == AutoBookStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_passes_limit(self, db):
        db.execute = AsyncMock(return_value=_result())
        await AutoBookRepository().find_active(db, NOW, 50)
        params = db.execute.call_args[0][1]
        assert params == {"now": NOW, "limit": 50}

    @pytest.mark.asyncio
    async def test_orders_by_created_at_then_id(self, db):
        db.execute = AsyncMock(return_value=_result())
        await AutoBookRepository().find_active(db, NOW, None)
        sql = str(db.execute.call_args[0][0])
        assert "ORDER BY a.created_at ASC, a.id ASC" in sql
        assert "a.status = 'ACTIVE'" in sql

    @pytest.mark.asyncio
    async def test_release_filter_applies_before_limit(self, db):
        db.execute = AsyncMock(return_value=_result())
        await AutoBookRepository().find_active(db, NOW, 2)
        sql = str(db.execute.call_args[0][0])
        assert "JOIN events e ON e.id = a.event_id" in sql
        assert sql.index("e.ticket_release_time <= :now") < sql.index("LIMIT :limit")


class TestTryTransition:
    @pytest.mark.asyncio
    async def test_returns_true_when_row_updated(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=("ab-1",)))
        ok = await AutoBookRepository().try_transition(
            db, "ab-1", AutoBookStatus.FAILED, FailureReason.BUDGET_EXCEEDED, NOW
        )
        assert ok is True
        params = db.execute.call_args[0][1]
        assert params["to_status"] == "FAILED"
        assert params["failure_reason"] == "BUDGET_EXCEEDED"
        assert params["checked_at"] == NOW

    @pytest.mark.asyncio
    async def test_returns_false_when_no_longer_active(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=None))
        ok = await AutoBookRepository().try_transition(
            db, "ab-1", AutoBookStatus.SUCCESS, None, NOW
        )
        assert ok is False

    @pytest.mark.asyncio
    async def test_sql_is_conditional_on_active(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=("ab-1",)))
        await AutoBookRepository().try_transition(db, "ab-1", AutoBookStatus.SUCCESS, None, NOW)
        sql = str(db.execute.call_args[0][0])
        assert "status = 'ACTIVE'" in sql
        assert "RETURNING id" in sql

    @pytest.mark.asyncio
    async def test_failed_without_reason_rejected(self, db):
        db.execute = AsyncMock()
        with pytest.raises(ValueError):
            await AutoBookRepository().try_transition(db, "ab-1", AutoBookStatus.FAILED, None, NOW)
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_active_target_rejected(self, db):
        db.execute = AsyncMock()
        with pytest.raises(ValueError):
            await AutoBookRepository().try_transition(db, "ab-1", AutoBookStatus.ACTIVE, None, NOW)


class TestFindDecidedPairs:
    @pytest.mark.asyncio
    async def test_empty_pairs_skip_query(self, db):
        db.execute = AsyncMock()
        assert await AutoBookRepository().find_decided_pairs(db, set(), set()) == set()
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_filters_cross_product_to_requested_pairs(self, db):
        rows = [
            _make_row(user_id="u1", event_id="e1"),
            _make_row(user_id="u1", event_id="e2"),  # not requested
        ]
        db.execute = AsyncMock(return_value=_result(fetchall=rows))
        found = await AutoBookRepository().find_decided_pairs(
            db, {("u1", "e1"), ("u2", "e2")}, {"ab-9"}
        )
        assert found == {("u1", "e1")}
        params = db.execute.call_args[0][1]
        assert params["user_ids_csv"] == "u1,u2"
        assert params["event_ids_csv"] == "e1,e2"
        assert params["exclude_ids_csv"] == "ab-9"

    @pytest.mark.asyncio
    async def test_no_exclusions_passes_null(self, db):
        db.execute = AsyncMock(return_value=_result())
        await AutoBookRepository().find_decided_pairs(db, {("u1", "e1")}, set())
        assert db.execute.call_args[0][1]["exclude_ids_csv"] is None


class TestCrud:
    @pytest.mark.asyncio
    async def test_save_inserts_enum_values(self, db):
        db.execute = AsyncMock()
        await AutoBookRepository().save(db, make_auto_book(seat_class=SeatClass.VIP))
        params = db.execute.call_args[0][1]
        assert params["seat_class"] == "VIP"
        assert params["status"] == "ACTIVE"

    @pytest.mark.asyncio
    async def test_get_by_id_maps_failure_reason(self, db):
        row = _make_row(status="FAILED", failure_reason="DUPLICATE_REQUEST")
        db.execute = AsyncMock(return_value=_result(fetchone=row))
        ab = await AutoBookRepository().get_by_id(db, "ab-1")
        assert ab is not None
        assert ab.failure_reason == FailureReason.DUPLICATE_REQUEST

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=None))
        assert await AutoBookRepository().get_by_id(db, "nope") is None

    @pytest.mark.asyncio
    async def test_delete_active(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=("ab-1",)))
        assert await AutoBookRepository().delete_active(db, "ab-1", "user-1") is True
        sql = str(db.execute.call_args[0][0])
        assert "status = 'ACTIVE'" in sql
