# src/bk_autobook/application/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import AutoBookStatus, FailureReason, SeatClass
from src.bk_common.money import minor_to_display


class CreateAutoBookRequest(BaseModel):
    event_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    seat_class: SeatClass = SeatClass.GENERAL
    max_budget: int = Field(ge=0, description="Budget for the whole order, minor units")

    @field_validator("quantity")
    @classmethod
    def quantity_within_limit(cls, v: int) -> int:
        if v > settings.AUTOBOOK_MAX_QUANTITY:
            raise ValueError(f"quantity must be at most {settings.AUTOBOOK_MAX_QUANTITY}")
        return v


class AutoBookResponse(BaseModel):
    id: str
    event_id: str
    quantity: int
    seat_class: SeatClass
    max_budget: int
    max_budget_display: str
    status: AutoBookStatus
    failure_reason: FailureReason | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_checked_at: datetime | None = None

    @classmethod
    def from_domain(cls, ab: AutoBook) -> "AutoBookResponse":
        return cls(
            id=ab.id,
            event_id=ab.event_id,
            quantity=ab.quantity,
            seat_class=ab.seat_class,
            max_budget=ab.max_budget,
            max_budget_display=minor_to_display(ab.max_budget),
            status=ab.status,
            failure_reason=ab.failure_reason,
            created_at=ab.created_at,
            updated_at=ab.updated_at,
            last_checked_at=ab.last_checked_at,
        )


class AutoBookListResponse(BaseModel):
    items: list[AutoBookResponse]


class CancelAutoBookResponse(BaseModel):
    auto_book_id: str
    cancelled: bool = True


class DryRunResponse(BaseModel):
    """Outcome the next pass would record, computed without persisting anything."""

    auto_book_id: str
    event_id: str
    would_succeed: bool
    status: AutoBookStatus
    failure_reason: FailureReason | None
    total_cost: int
    total_cost_display: str
    elapsed_seconds: int
    title: str
    message: str
