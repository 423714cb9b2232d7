"""Human-readable messages for processing outcomes.

`build_message` produces the per-item line stored in a pass summary.
`DISPLAY_CATALOGUE` holds the short title/description pair shown by clients
for each terminal outcome.
"""

from dataclasses import dataclass
from datetime import timedelta

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.datetime_utils import minutes_rounded_up
from src.bk_common.enums import FailureReason
from src.bk_event.domain.models import Event
from src.bk_processing.engine.evaluator import Evaluation

DUPLICATE_MESSAGE = "Duplicate auto-book: another request for this event was already processed"
STORE_ERROR_MESSAGE = "Could not save the result; it will be retried on the next pass"
DRY_RUN_PREFIX = "[DRY-RUN] "

_UPSTREAM_MESSAGES: dict[FailureReason, str] = {
    FailureReason.SOLD_OUT_FAST: "Tickets sold out before becoming available for your preferences",
    FailureReason.PLATFORM_ERROR: "The booking platform returned an error while checking availability",
    FailureReason.QUANTITY_UNAVAILABLE: (
        "The requested quantity was not available for your seat preference"
    ),
    FailureReason.NETWORK_TIMEOUT: "Availability could not be checked due to a network timeout",
}


def success_message(auto_book: AutoBook, event: Event, total: int) -> str:
    return (
        f"Availability confirmed: {auto_book.quantity} × {event.price} = {total} "
        f"within your budget of {auto_book.max_budget} "
        f"({auto_book.quantity} {auto_book.seat_class.value} ticket(s))"
    )


def budget_message(auto_book: AutoBook, event: Event, total: int) -> str:
    return (
        f"Total cost {auto_book.quantity} × {event.price} = {total} "
        f"exceeds your budget of {auto_book.max_budget}"
    )


def window_message(elapsed: timedelta, booking_window: timedelta) -> str:
    # Elapsed rounds up and the window rounds down, so elapsed always reads as larger
    return (
        f"Booking window missed: tickets released {minutes_rounded_up(elapsed)} minute(s) ago, "
        f"window is {booking_window // timedelta(minutes=1)} minute(s)"
    )


def upstream_message(reason: FailureReason) -> str:
    return _UPSTREAM_MESSAGES[reason]


def build_message(
    auto_book: AutoBook,
    event: Event,
    evaluation: Evaluation,
    booking_window: timedelta,
) -> str:
    """Message for an evaluator outcome."""
    if evaluation.is_success:
        return success_message(auto_book, event, evaluation.total_cost)
    if evaluation.failure_reason == FailureReason.BUDGET_EXCEEDED:
        return budget_message(auto_book, event, evaluation.total_cost)
    if evaluation.failure_reason == FailureReason.BOOKING_WINDOW_MISSED:
        return window_message(evaluation.elapsed, booking_window)
    # evaluate() only yields the two reasons above
    raise ValueError(f"Unexpected evaluation reason: {evaluation.failure_reason}")


# ---------------------------------------------------------------------------
# Display catalogue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DisplayText:
    title: str
    description: str


SUCCESS_DISPLAY = DisplayText(
    "Availability Confirmed",
    "Tickets matching your preferences were available at release time.",
)

DISPLAY_CATALOGUE: dict[FailureReason, DisplayText] = {
    FailureReason.BUDGET_EXCEEDED: DisplayText(
        "Budget Limit Exceeded",
        "The ticket price for your quantity exceeded your maximum budget. "
        "Increase your budget limit to book these tickets.",
    ),
    FailureReason.BOOKING_WINDOW_MISSED: DisplayText(
        "Booking Window Closed",
        "Availability was checked after the booking window following release had closed.",
    ),
    FailureReason.DUPLICATE_REQUEST: DisplayText(
        "Duplicate Request",
        "Another auto-book of yours for this event was already processed.",
    ),
    FailureReason.SOLD_OUT_FAST: DisplayText(
        "Sold Out",
        "Tickets sold out before becoming available for your preferences.",
    ),
    FailureReason.PLATFORM_ERROR: DisplayText(
        "Platform Error",
        "The booking platform returned an error. Try again later or book manually.",
    ),
    FailureReason.QUANTITY_UNAVAILABLE: DisplayText(
        "Insufficient Quantity",
        "The requested quantity of tickets was not available for your seat preference.",
    ),
    FailureReason.NETWORK_TIMEOUT: DisplayText(
        "Network Timeout",
        "Unable to check availability due to a connection error.",
    ),
}


def display_for(failure_reason: FailureReason | None) -> DisplayText:
    """SUCCESS_DISPLAY for None, otherwise the catalogue entry."""
    if failure_reason is None:
        return SUCCESS_DISPLAY
    return DISPLAY_CATALOGUE[failure_reason]
