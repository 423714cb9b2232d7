"""AutoBookProcessor - one idempotent pass over all ACTIVE auto-books.

Stages:
  1. promote_events      COMING_SOON -> LIVE for released events (bulk, conditional)
  2. select_candidates   ACTIVE auto-books whose event exists and has released
  3. suppress_duplicates first per (user, event) is evaluated, later ones are duplicates
  4. per item            evaluate, consult upstream, conditional transition
  5. summary

Every stage and every item runs in its own short transaction. Exactly-once
transition is guaranteed by the conditional UPDATE in try_transition, so
overlapping passes are safe: the loser of a race sees False and counts a conflict.
"""

import asyncio
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.bk_autobook.domain.repository import AutoBookRepositoryProtocol
from src.bk_autobook.infrastructure.persistence import AutoBookRepository
from src.bk_common.enums import (
    UPSTREAM_FAILURE_REASONS,
    AutoBookStatus,
    FailureReason,
    ItemOutcome,
)
from src.bk_common.errors import ProcessingPassError, UpstreamError
from src.bk_common.money import total_cost
from src.bk_event.domain.repository import EventRepositoryProtocol
from src.bk_event.infrastructure.persistence import EventRepository
from src.bk_processing.domain.models import Candidate, ItemResult, ProcessingSummary
from src.bk_processing.engine.evaluator import DEFAULT_BOOKING_WINDOW, evaluate
from src.bk_processing.engine.messages import (
    DUPLICATE_MESSAGE,
    STORE_ERROR_MESSAGE,
    build_message,
    upstream_message,
)
from src.bk_processing.engine.upstream import UpstreamAvailabilityProtocol

logger = logging.getLogger(__name__)

# Failures of a single store call; anything else is a bug and propagates
_STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)

PairKey = tuple[str, str]


class AutoBookProcessor:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        event_repo: EventRepositoryProtocol | None = None,
        auto_book_repo: AutoBookRepositoryProtocol | None = None,
        booking_window: timedelta = DEFAULT_BOOKING_WINDOW,
        batch_limit: int | None = None,
        upstream: UpstreamAvailabilityProtocol | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._event_repo: EventRepositoryProtocol = event_repo or EventRepository()
        self._auto_book_repo: AutoBookRepositoryProtocol = auto_book_repo or AutoBookRepository()
        self._booking_window = booking_window
        self._batch_limit = batch_limit
        self._upstream = upstream

    async def run_pass(self, now: datetime) -> ProcessingSummary:
        """Run one full pass at `now`. Raises ProcessingPassError if selection fails."""
        summary = ProcessingSummary(processed_at=now)
        summary.events_transitioned = await self.promote_events(now)

        try:
            candidates = await self.select_candidates(now)
            decided = await self._load_decided_pairs(candidates)
        except _STORE_ERRORS as exc:
            logger.error("Candidate selection failed at %s: %s", now, exc)
            raise ProcessingPassError(str(exc)) from exc

        for candidate, is_duplicate in self.suppress_duplicates(candidates, decided):
            result = await self._process_item(candidate, is_duplicate, now)
            if result is None:
                summary.conflicts += 1
                continue
            summary.record(result)

        logger.info(
            "Pass at %s: events_transitioned=%d processed=%d success=%d failed=%d "
            "errors=%d conflicts=%d",
            now, summary.events_transitioned, summary.items_processed, summary.successes,
            summary.failures, summary.errors, summary.conflicts,
        )
        return summary

    # ------------------------------------------------------------------
    # Stage 1
    # ------------------------------------------------------------------

    async def promote_events(self, now: datetime) -> int:
        """Promote released COMING_SOON events to LIVE. Store errors yield 0."""
        try:
            async with self._session_factory() as db, db.begin():
                promotable = await self._event_repo.find_promotable(db, now)
                if not promotable:
                    return 0
                count = await self._event_repo.promote_to_live(
                    db, [e.id for e in promotable], now
                )
        except _STORE_ERRORS as exc:
            # Eligibility is decided by release time, so the pass can continue
            logger.warning("Event promotion failed at %s, continuing: %s", now, exc)
            return 0
        if count:
            logger.info("Promoted %d event(s) to LIVE", count)
        return count

    # ------------------------------------------------------------------
    # Stage 2
    # ------------------------------------------------------------------

    async def select_candidates(self, now: datetime) -> list[Candidate]:
        """ACTIVE auto-books with an existing, released event, in (created_at, id) order.

        Release eligibility is applied by the store before the batch limit.
        """
        async with self._session_factory() as db, db.begin():
            active = await self._auto_book_repo.find_active(db, now, self._batch_limit)
            if not active:
                return []
            events = await self._event_repo.get_by_ids(db, sorted({ab.event_id for ab in active}))

        candidates: list[Candidate] = []
        for auto_book in sorted(active, key=lambda ab: (ab.created_at, ab.id)):
            event = events.get(auto_book.event_id)
            if event is None:
                logger.warning(
                    "Auto-book %s references missing event %s, left ACTIVE",
                    auto_book.id, auto_book.event_id,
                )
                continue
            if not event.is_released(now):
                continue
            candidates.append(Candidate(auto_book=auto_book, event=event))
        return candidates

    async def _load_decided_pairs(self, candidates: list[Candidate]) -> set[PairKey]:
        if not candidates:
            return set()
        async with self._session_factory() as db, db.begin():
            return await self._auto_book_repo.find_decided_pairs(
                db,
                {c.auto_book.pair_key for c in candidates},
                {c.auto_book.id for c in candidates},
            )

    # ------------------------------------------------------------------
    # Stage 3
    # ------------------------------------------------------------------

    @staticmethod
    def suppress_duplicates(
        candidates: list[Candidate], decided_pairs: set[PairKey] | None = None
    ) -> list[tuple[Candidate, bool]]:
        """Pair each candidate with is_duplicate; the earliest per (user, event) wins."""
        seen: set[PairKey] = set(decided_pairs or ())
        flagged: list[tuple[Candidate, bool]] = []
        ordered = sorted(candidates, key=lambda c: (c.auto_book.created_at, c.auto_book.id))
        for candidate in ordered:
            key = candidate.auto_book.pair_key
            flagged.append((candidate, key in seen))
            seen.add(key)
        return flagged

    # ------------------------------------------------------------------
    # Stage 4
    # ------------------------------------------------------------------

    async def _decide(
        self, candidate: Candidate, is_duplicate: bool, now: datetime
    ) -> tuple[AutoBookStatus, FailureReason | None, int, str]:
        """Return (status, failure_reason, total_cost, message) for one candidate."""
        auto_book, event = candidate.auto_book, candidate.event
        if is_duplicate:
            total = total_cost(event.price, auto_book.quantity)
            return AutoBookStatus.FAILED, FailureReason.DUPLICATE_REQUEST, total, DUPLICATE_MESSAGE

        evaluation = evaluate(auto_book, event, now, self._booking_window)
        message = build_message(auto_book, event, evaluation, self._booking_window)
        if evaluation.is_success and self._upstream is not None:
            reason = await self._upstream.check(auto_book, event)
            if reason is not None:
                if reason not in UPSTREAM_FAILURE_REASONS:
                    raise UpstreamError(f"upstream returned non-upstream reason {reason}")
                return (
                    AutoBookStatus.FAILED, reason, evaluation.total_cost, upstream_message(reason)
                )
        return evaluation.status, evaluation.failure_reason, evaluation.total_cost, message

    async def _process_item(
        self, candidate: Candidate, is_duplicate: bool, now: datetime
    ) -> ItemResult | None:
        """Decide and persist one item. None means another pass already decided it."""
        auto_book = candidate.auto_book
        try:
            status, reason, total, message = await self._decide(candidate, is_duplicate, now)
        except (UpstreamError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Upstream check failed for auto-book %s: %s", auto_book.id, exc)
            return self._error_result(candidate, f"Availability check failed: {exc}")

        try:
            async with self._session_factory() as db, db.begin():
                applied = await self._auto_book_repo.try_transition(
                    db, auto_book.id, status, reason, now
                )
        except _STORE_ERRORS as exc:
            logger.error("Could not persist outcome of auto-book %s: %s", auto_book.id, exc)
            return self._error_result(candidate, STORE_ERROR_MESSAGE)

        if not applied:
            logger.info("Auto-book %s already decided elsewhere, skipped", auto_book.id)
            return None

        outcome = ItemOutcome.SUCCESS if status == AutoBookStatus.SUCCESS else ItemOutcome.FAILED
        return self._result(candidate, outcome, reason, total, message)

    @staticmethod
    def _result(
        candidate: Candidate,
        outcome: ItemOutcome,
        reason: FailureReason | None,
        total: int,
        message: str,
    ) -> ItemResult:
        auto_book, event = candidate.auto_book, candidate.event
        return ItemResult(
            auto_book_id=auto_book.id,
            user_id=auto_book.user_id,
            event_id=event.id,
            event_name=event.name,
            outcome=outcome,
            failure_reason=reason,
            quantity=auto_book.quantity,
            seat_class=auto_book.seat_class,
            total_cost=total,
            message=message,
        )

    def _error_result(self, candidate: Candidate, message: str) -> ItemResult:
        total = total_cost(candidate.event.price, candidate.auto_book.quantity)
        return self._result(candidate, ItemOutcome.ERROR, None, total, message)

