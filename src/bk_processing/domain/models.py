"""Processing pass domain models - pure dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import FailureReason, ItemOutcome, SeatClass
from src.bk_event.domain.models import Event


@dataclass
class Candidate:
    """An ACTIVE auto-book whose event exists and has released tickets."""

    auto_book: AutoBook
    event: Event


@dataclass
class ItemResult:
    auto_book_id: str
    user_id: str
    event_id: str
    event_name: str
    outcome: ItemOutcome
    failure_reason: FailureReason | None
    quantity: int
    seat_class: SeatClass
    total_cost: int
    message: str


@dataclass
class ProcessingSummary:
    events_transitioned: int = 0
    items_processed: int = 0
    successes: int = 0
    failures: int = 0
    errors: int = 0
    conflicts: int = 0
    per_item_results: list[ItemResult] = field(default_factory=list)
    processed_at: datetime | None = None

    def record(self, result: ItemResult) -> None:
        self.per_item_results.append(result)
        self.items_processed += 1
        if result.outcome == ItemOutcome.SUCCESS:
            self.successes += 1
        elif result.outcome == ItemOutcome.FAILED:
            self.failures += 1
        else:
            self.errors += 1
