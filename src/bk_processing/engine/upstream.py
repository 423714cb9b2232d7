"""Upstream availability source contract.

Consulted only after a SUCCESS evaluation. Returning None confirms the
evaluator's verdict; returning one of UPSTREAM_FAILURE_REASONS overrides it
with that reason, unchanged. Implementations signal "could not answer" by
raising UpstreamError.
"""

from typing import Protocol

from src.bk_autobook.domain.models import AutoBook
from src.bk_common.enums import FailureReason
from src.bk_event.domain.models import Event


class UpstreamAvailabilityProtocol(Protocol):
    async def check(self, auto_book: AutoBook, event: Event) -> FailureReason | None: ...
