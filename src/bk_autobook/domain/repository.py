# src/bk_autobook/domain/repository.py
"""AutoBookRepository Protocol - the AutoBookStore contract.

`try_transition` is the only way the processor mutates an auto-book. It is a
compare-and-swap on status: it returns False when the row is no longer ACTIVE
(another pass got there first, or the user cancelled it).
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import AutoBookStatus, FailureReason


class AutoBookRepositoryProtocol(Protocol):
    async def find_active(
        self, db: AsyncSession, now: datetime, limit: int | None
    ) -> list[AutoBook]: ...

    async def try_transition(
        self,
        db: AsyncSession,
        auto_book_id: str,
        to_status: AutoBookStatus,
        failure_reason: FailureReason | None,
        checked_at: datetime,
    ) -> bool: ...

    async def find_decided_pairs(
        self,
        db: AsyncSession,
        pairs: set[tuple[str, str]],
        exclude_ids: set[str],
    ) -> set[tuple[str, str]]: ...

    async def save(self, db: AsyncSession, auto_book: AutoBook) -> None: ...

    async def get_by_id(self, db: AsyncSession, auto_book_id: str) -> AutoBook | None: ...

    async def get_by_user_and_event(
        self, db: AsyncSession, user_id: str, event_id: str
    ) -> AutoBook | None: ...

    async def list_by_user(
        self, db: AsyncSession, user_id: str, status: str | None, limit: int
    ) -> list[AutoBook]: ...

    async def delete_active(self, db: AsyncSession, auto_book_id: str, user_id: str) -> bool: ...
