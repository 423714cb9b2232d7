# src/bk_event/domain/repository.py
"""EventRepository Protocol - the EventStore contract consumed by the processor.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_event.domain.models import Event


class EventRepositoryProtocol(Protocol):
    async def find_promotable(self, db: AsyncSession, now: datetime) -> list[Event]: ...

    async def promote_to_live(
        self, db: AsyncSession, event_ids: list[str], now: datetime
    ) -> int: ...

    async def get_by_id(self, db: AsyncSession, event_id: str) -> Event | None: ...

    async def get_by_ids(self, db: AsyncSession, event_ids: list[str]) -> dict[str, Event]: ...

    async def list_events(
        self, db: AsyncSession, status: str | None, limit: int
    ) -> list[Event]: ...

    async def save(self, db: AsyncSession, event: Event) -> None: ...

    async def release_now(self, db: AsyncSession, event_id: str, now: datetime) -> bool: ...
