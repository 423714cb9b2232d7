"""Pydantic schemas for processing pass responses."""

from pydantic import BaseModel

from src.bk_common.enums import FailureReason, ItemOutcome, SeatClass
from src.bk_common.money import minor_to_display
from src.bk_processing.domain.models import ItemResult, ProcessingSummary


class ItemResultResponse(BaseModel):
    auto_book_id: str
    user_id: str
    event_id: str
    event_name: str
    outcome: ItemOutcome
    failure_reason: FailureReason | None
    quantity: int
    seat_class: SeatClass
    total_cost: int
    total_cost_display: str
    message: str

    @classmethod
    def from_domain(cls, r: ItemResult) -> "ItemResultResponse":
        return cls(
            auto_book_id=r.auto_book_id,
            user_id=r.user_id,
            event_id=r.event_id,
            event_name=r.event_name,
            outcome=r.outcome,
            failure_reason=r.failure_reason,
            quantity=r.quantity,
            seat_class=r.seat_class,
            total_cost=r.total_cost,
            total_cost_display=minor_to_display(r.total_cost),
            message=r.message,
        )


class ProcessingSummaryResponse(BaseModel):
    events_transitioned: int
    items_processed: int
    successes: int
    failures: int
    errors: int
    conflicts: int
    per_item_results: list[ItemResultResponse]
    processed_at: str | None

    @classmethod
    def from_domain(cls, s: ProcessingSummary) -> "ProcessingSummaryResponse":
        return cls(
            events_transitioned=s.events_transitioned,
            items_processed=s.items_processed,
            successes=s.successes,
            failures=s.failures,
            errors=s.errors,
            conflicts=s.conflicts,
            per_item_results=[ItemResultResponse.from_domain(r) for r in s.per_item_results],
            processed_at=s.processed_at.isoformat() if s.processed_at else None,
        )
