"""Unit tests for AutoBookApplicationService."""
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.bk_autobook.application.schemas import CreateAutoBookRequest
from src.bk_autobook.application.service import AutoBookApplicationService
from src.bk_common.enums import AutoBookStatus, EventStatus, FailureReason, SeatClass
from src.bk_common.errors import (
    AutoBookNotCancellableError,
    AutoBookNotFoundError,
    DuplicateAutoBookError,
    EventNotBookableError,
    EventNotFoundError,
    TicketsNotReleasedError,
)
from tests.unit.factories import NOW, make_auto_book, make_event
from tests.unit.fakes import FakeSession, InMemoryAutoBookRepository, InMemoryEventRepository


def _service(events=None, auto_books=None):
    ab_repo = InMemoryAutoBookRepository(auto_books or [])
    event_repo = InMemoryEventRepository(events if events is not None else [make_event()])
    svc = AutoBookApplicationService(
        ab_repo, event_repo, booking_window=timedelta(minutes=5)
    )
    return svc, ab_repo, event_repo


def _req(**kwargs) -> CreateAutoBookRequest:
    defaults = {"event_id": "evt-1", "quantity": 2, "seat_class": "PREMIUM", "max_budget": 5000}
    defaults.update(kwargs)
    return CreateAutoBookRequest(**defaults)


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_active_auto_book(self) -> None:
        svc, ab_repo, _ = _service()
        db = FakeSession()
        resp = await svc.create_auto_book(db, "user-1", _req(), NOW)
        assert resp.status == AutoBookStatus.ACTIVE
        assert resp.seat_class == SeatClass.PREMIUM
        assert ab_repo.auto_books[resp.id].user_id == "user-1"
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_event(self) -> None:
        svc, _, _ = _service(events=[])
        with pytest.raises(EventNotFoundError):
            await svc.create_auto_book(FakeSession(), "user-1", _req(), NOW)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event_kwargs",
        [{"status": EventStatus.SOLD_OUT}, {"status": EventStatus.EXPIRED}, {"is_active": False}],
    )
    async def test_event_not_bookable(self, event_kwargs) -> None:
        svc, _, _ = _service(events=[make_event(**event_kwargs)])
        with pytest.raises(EventNotBookableError):
            await svc.create_auto_book(FakeSession(), "user-1", _req(), NOW)

    @pytest.mark.asyncio
    async def test_duplicate_pair_rejected(self) -> None:
        svc, _, _ = _service(auto_books=[make_auto_book()])
        with pytest.raises(DuplicateAutoBookError):
            await svc.create_auto_book(FakeSession(), "user-1", _req(), NOW)

    @pytest.mark.asyncio
    async def test_unique_violation_maps_to_duplicate(self) -> None:
        svc, ab_repo, _ = _service()
        ab_repo.save = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("uq")))
        db = FakeSession()
        with pytest.raises(DuplicateAutoBookError):
            await svc.create_auto_book(db, "user-1", _req(), NOW)
        db.rollback.assert_awaited_once()


class TestReadAndCancel:
    @pytest.mark.asyncio
    async def test_other_users_auto_book_is_not_found(self) -> None:
        svc, _, _ = _service(auto_books=[make_auto_book(user_id="someone-else")])
        with pytest.raises(AutoBookNotFoundError):
            await svc.get_auto_book(FakeSession(), "user-1", "ab-1")

    @pytest.mark.asyncio
    async def test_list_own_only(self) -> None:
        books = [make_auto_book(id="ab-1"), make_auto_book(id="ab-2", user_id="other")]
        svc, _, _ = _service(auto_books=books)
        resp = await svc.list_auto_books(FakeSession(), "user-1", None, 50)
        assert [ab.id for ab in resp.items] == ["ab-1"]

    @pytest.mark.asyncio
    async def test_cancel_active(self) -> None:
        svc, ab_repo, _ = _service(auto_books=[make_auto_book()])
        resp = await svc.cancel_auto_book(FakeSession(), "user-1", "ab-1")
        assert resp.cancelled
        assert "ab-1" not in ab_repo.auto_books

    @pytest.mark.asyncio
    async def test_cancel_decided_rejected(self) -> None:
        decided = make_auto_book(status=AutoBookStatus.SUCCESS)
        svc, ab_repo, _ = _service(auto_books=[decided])
        with pytest.raises(AutoBookNotCancellableError):
            await svc.cancel_auto_book(FakeSession(), "user-1", "ab-1")
        assert "ab-1" in ab_repo.auto_books

    @pytest.mark.asyncio
    async def test_cancel_missing(self) -> None:
        svc, _, _ = _service()
        with pytest.raises(AutoBookNotFoundError):
            await svc.cancel_auto_book(FakeSession(), "user-1", "nope")


class TestDryRun:
    @pytest.mark.asyncio
    async def test_success_is_prefixed_and_not_persisted(self) -> None:
        svc, ab_repo, _ = _service(auto_books=[make_auto_book(quantity=2, max_budget=2000)])
        resp = await svc.dry_run(FakeSession(), "user-1", "ab-1", NOW)
        assert resp.would_succeed
        assert resp.message.startswith("[DRY-RUN] ")
        assert "2 × 1000 = 2000" in resp.message
        assert ab_repo.auto_books["ab-1"].status == AutoBookStatus.ACTIVE
        assert ab_repo.transitions == []

    @pytest.mark.asyncio
    async def test_budget_failure(self) -> None:
        svc, _, _ = _service(auto_books=[make_auto_book(max_budget=10)])
        resp = await svc.dry_run(FakeSession(), "user-1", "ab-1", NOW)
        assert resp.failure_reason == FailureReason.BUDGET_EXCEEDED
        assert resp.title == "Budget Limit Exceeded"

    @pytest.mark.asyncio
    async def test_not_released_yet(self) -> None:
        event = make_event(status=EventStatus.COMING_SOON, ticket_release_time=NOW + timedelta(minutes=1))
        svc, _, _ = _service(events=[event], auto_books=[make_auto_book()])
        with pytest.raises(TicketsNotReleasedError):
            await svc.dry_run(FakeSession(), "user-1", "ab-1", NOW)
