"""AutoBookApplicationService - user-facing auto-book operations.

Users create auto-books in ACTIVE and may cancel them until the processor
decides them. Dry-run evaluates one against its event without saving.
Nothing here moves an auto-book out of ACTIVE.
"""

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_autobook.application.schemas import (
    AutoBookListResponse,
    AutoBookResponse,
    CancelAutoBookResponse,
    CreateAutoBookRequest,
    DryRunResponse,
)
from src.bk_autobook.domain.models import AutoBook
from src.bk_autobook.domain.repository import AutoBookRepositoryProtocol
from src.bk_autobook.infrastructure.persistence import AutoBookRepository
from src.bk_common.enums import AutoBookStatus
from src.bk_common.errors import (
    AutoBookNotCancellableError,
    AutoBookNotFoundError,
    DuplicateAutoBookError,
    EventNotBookableError,
    EventNotFoundError,
    TicketsNotReleasedError,
)
from src.bk_common.money import minor_to_display
from src.bk_event.domain.repository import EventRepositoryProtocol
from src.bk_event.infrastructure.persistence import EventRepository
from src.bk_processing.engine.evaluator import evaluate
from src.bk_processing.engine.messages import DRY_RUN_PREFIX, build_message, display_for

logger = logging.getLogger(__name__)


class AutoBookApplicationService:
    def __init__(
        self,
        repo: AutoBookRepositoryProtocol | None = None,
        event_repo: EventRepositoryProtocol | None = None,
        booking_window: timedelta | None = None,
    ) -> None:
        self._repo: AutoBookRepositoryProtocol = repo or AutoBookRepository()
        self._event_repo: EventRepositoryProtocol = event_repo or EventRepository()
        self._booking_window = booking_window or timedelta(
            seconds=settings.BOOKING_WINDOW_SECONDS
        )

    async def create_auto_book(
        self, db: AsyncSession, user_id: str, req: CreateAutoBookRequest, now: datetime
    ) -> AutoBookResponse:
        event = await self._event_repo.get_by_id(db, req.event_id)
        if event is None:
            raise EventNotFoundError(req.event_id)
        if not event.accepts_auto_books:
            status = event.status.value if event.is_active else "INACTIVE"
            raise EventNotBookableError(event.id, status)
        if await self._repo.get_by_user_and_event(db, user_id, req.event_id) is not None:
            raise DuplicateAutoBookError(req.event_id)

        auto_book = AutoBook(
            id=str(uuid.uuid4()),
            user_id=user_id,
            event_id=req.event_id,
            quantity=req.quantity,
            seat_class=req.seat_class,
            max_budget=req.max_budget,
            status=AutoBookStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._repo.save(db, auto_book)
            await db.commit()
        except IntegrityError:
            # UNIQUE (user_id, event_id) lost to a concurrent create
            await db.rollback()
            raise DuplicateAutoBookError(req.event_id) from None
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Auto-book %s created: user=%s event=%s qty=%d budget=%d",
            auto_book.id, user_id, req.event_id, req.quantity, req.max_budget,
        )
        return AutoBookResponse.from_domain(auto_book)

    async def list_auto_books(
        self, db: AsyncSession, user_id: str, status: str | None, limit: int
    ) -> AutoBookListResponse:
        items = await self._repo.list_by_user(db, user_id, status, limit)
        return AutoBookListResponse(items=[AutoBookResponse.from_domain(ab) for ab in items])

    async def _get_own(self, db: AsyncSession, user_id: str, auto_book_id: str) -> AutoBook:
        auto_book = await self._repo.get_by_id(db, auto_book_id)
        # Other users' auto-books are reported as missing
        if auto_book is None or auto_book.user_id != user_id:
            raise AutoBookNotFoundError(auto_book_id)
        return auto_book

    async def get_auto_book(
        self, db: AsyncSession, user_id: str, auto_book_id: str
    ) -> AutoBookResponse:
        return AutoBookResponse.from_domain(await self._get_own(db, user_id, auto_book_id))

    async def cancel_auto_book(
        self, db: AsyncSession, user_id: str, auto_book_id: str
    ) -> CancelAutoBookResponse:
        try:
            deleted = await self._repo.delete_active(db, auto_book_id, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if not deleted:
            auto_book = await self._get_own(db, user_id, auto_book_id)
            raise AutoBookNotCancellableError(auto_book_id, auto_book.status.value)
        logger.info("Auto-book %s cancelled by %s", auto_book_id, user_id)
        return CancelAutoBookResponse(auto_book_id=auto_book_id)

    async def dry_run(
        self, db: AsyncSession, user_id: str, auto_book_id: str, now: datetime
    ) -> DryRunResponse:
        """Evaluate an auto-book against its event at `now` without persisting."""
        auto_book = await self._get_own(db, user_id, auto_book_id)
        event = await self._event_repo.get_by_id(db, auto_book.event_id)
        if event is None:
            raise EventNotFoundError(auto_book.event_id)
        if not event.is_released(now):
            raise TicketsNotReleasedError(event.id)

        evaluation = evaluate(auto_book, event, now, self._booking_window)
        message = build_message(auto_book, event, evaluation, self._booking_window)
        return DryRunResponse(
            auto_book_id=auto_book.id,
            event_id=event.id,
            would_succeed=evaluation.is_success,
            status=evaluation.status,
            failure_reason=evaluation.failure_reason,
            total_cost=evaluation.total_cost,
            total_cost_display=minor_to_display(evaluation.total_cost),
            elapsed_seconds=int(evaluation.elapsed.total_seconds()),
            title=display_for(evaluation.failure_reason).title,
            message=DRY_RUN_PREFIX + message,
        )
