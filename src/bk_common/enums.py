"""Global enums - must match DB CHECK constraints exactly.

See alembic/versions/001_create_events.py and 002_create_auto_books.py.
"""

from enum import Enum


class EventStatus(str, Enum):
    COMING_SOON = "COMING_SOON"
    LIVE = "LIVE"
    SOLD_OUT = "SOLD_OUT"
    EXPIRED = "EXPIRED"


class SeatClass(str, Enum):
    GENERAL = "GENERAL"
    PREMIUM = "PREMIUM"
    VIP = "VIP"


class AutoBookStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class FailureReason(str, Enum):
    # Policy failures (produced by the evaluator / duplicate suppression)
    BUDGET_EXCEEDED = "BUDGET_EXCEEDED"
    BOOKING_WINDOW_MISSED = "BOOKING_WINDOW_MISSED"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    # Reported by an upstream ticketing integration, passed through unchanged
    SOLD_OUT_FAST = "SOLD_OUT_FAST"
    PLATFORM_ERROR = "PLATFORM_ERROR"
    QUANTITY_UNAVAILABLE = "QUANTITY_UNAVAILABLE"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"


UPSTREAM_FAILURE_REASONS: frozenset[FailureReason] = frozenset({
    FailureReason.SOLD_OUT_FAST,
    FailureReason.PLATFORM_ERROR,
    FailureReason.QUANTITY_UNAVAILABLE,
    FailureReason.NETWORK_TIMEOUT,
})


class ItemOutcome(str, Enum):
    """Per-item result of a processing pass. ERROR is infrastructure, not policy."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    ERROR = "ERROR"
