"""Availability evaluation - pure function of (auto_book, event, now).

Rules, in strict priority order:
  1. total = price * quantity; total > max_budget       -> FAILED / BUDGET_EXCEEDED
  2. now - ticket_release_time > booking_window         -> FAILED / BOOKING_WINDOW_MISSED
  3. otherwise                                          -> SUCCESS

Both comparisons are strict, so the boundaries are inclusive: a total equal to
the budget is within budget, and exactly `booking_window` elapsed is within the
window. No clock reads and no randomness; `now` is always passed in.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import AutoBookStatus, FailureReason
from src.bk_common.money import total_cost as compute_total
from src.bk_event.domain.models import Event

DEFAULT_BOOKING_WINDOW = timedelta(minutes=5)


@dataclass(frozen=True)
class Evaluation:
    status: AutoBookStatus
    failure_reason: FailureReason | None
    total_cost: int
    elapsed: timedelta

    @property
    def is_success(self) -> bool:
        return self.status == AutoBookStatus.SUCCESS


def evaluate(
    auto_book: AutoBook,
    event: Event,
    now: datetime,
    booking_window: timedelta = DEFAULT_BOOKING_WINDOW,
) -> Evaluation:
    """Decide the terminal outcome of one auto-book against its released event.

    Caller guarantees event.ticket_release_time <= now.
    """
    total = compute_total(event.price, auto_book.quantity)
    elapsed = now - event.ticket_release_time

    if total > auto_book.max_budget:
        return Evaluation(AutoBookStatus.FAILED, FailureReason.BUDGET_EXCEEDED, total, elapsed)
    if elapsed > booking_window:
        return Evaluation(AutoBookStatus.FAILED, FailureReason.BOOKING_WINDOW_MISSED, total, elapsed)
    return Evaluation(AutoBookStatus.SUCCESS, None, total, elapsed)
