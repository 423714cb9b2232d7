"""AutoBook domain model - pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.bk_common.enums import AutoBookStatus, FailureReason, SeatClass


@dataclass
class AutoBook:
    id: str
    user_id: str
    event_id: str
    quantity: int
    seat_class: SeatClass
    max_budget: int  # minor units, for the whole order
    status: AutoBookStatus = AutoBookStatus.ACTIVE
    failure_reason: FailureReason | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_checked_at: datetime | None = None

    @property
    def pair_key(self) -> tuple[str, str]:
        """One decision per (user, event)."""
        return (self.user_id, self.event_id)
