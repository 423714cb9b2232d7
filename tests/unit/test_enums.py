"""Tests for bk_common.enums - values must match DB CHECK constraints."""

from src.bk_common.enums import (
    UPSTREAM_FAILURE_REASONS,
    AutoBookStatus,
    EventStatus,
    FailureReason,
    ItemOutcome,
    SeatClass,
)


def test_event_status_values() -> None:
    assert {s.value for s in EventStatus} == {"COMING_SOON", "LIVE", "SOLD_OUT", "EXPIRED"}


def test_seat_classes() -> None:
    assert {s.value for s in SeatClass} == {"GENERAL", "PREMIUM", "VIP"}


def test_auto_book_status_values() -> None:
    assert {s.value for s in AutoBookStatus} == {"ACTIVE", "SUCCESS", "FAILED"}


def test_upstream_reasons_exclude_policy_reasons() -> None:
    assert len(UPSTREAM_FAILURE_REASONS) == 4
    for reason in (
        FailureReason.BUDGET_EXCEEDED,
        FailureReason.BOOKING_WINDOW_MISSED,
        FailureReason.DUPLICATE_REQUEST,
    ):
        assert reason not in UPSTREAM_FAILURE_REASONS


def test_str_enum_compares_to_value() -> None:
    assert ItemOutcome.ERROR == "ERROR"
    assert FailureReason("SOLD_OUT_FAST") is FailureReason.SOLD_OUT_FAST
