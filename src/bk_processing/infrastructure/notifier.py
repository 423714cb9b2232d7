"""Result notifiers - fan processing results out to interested parties.

LoggingNotifier is the default. RedisNotifier publishes each result on
`{prefix}:{user_id}:{event_id}` so realtime subscribers of one user/event
pair receive its outcome. Publishing is best effort: failures are logged and
never propagate into the pass.
"""

import json
import logging
from dataclasses import asdict
from typing import Any, Protocol

from redis.exceptions import RedisError

from src.bk_common.enums import ItemOutcome
from src.bk_processing.domain.models import ItemResult
from src.bk_processing.engine.messages import display_for

logger = logging.getLogger(__name__)


class NotifierProtocol(Protocol):
    async def notify(self, results: list[ItemResult]) -> None: ...


def result_payload(result: ItemResult) -> dict[str, Any]:
    """JSON-ready dict for one result, with the display title/description."""
    payload = asdict(result)
    payload["outcome"] = result.outcome.value
    payload["seat_class"] = result.seat_class.value
    payload["failure_reason"] = result.failure_reason.value if result.failure_reason else None
    if result.outcome != ItemOutcome.ERROR:
        display = display_for(result.failure_reason)
        payload["title"] = display.title
        payload["description"] = display.description
    return payload


class LoggingNotifier:
    async def notify(self, results: list[ItemResult]) -> None:
        for r in results:
            logger.info(
                "Auto-book %s (user=%s event=%s): %s %s - %s",
                r.auto_book_id, r.user_id, r.event_id, r.outcome.value,
                r.failure_reason.value if r.failure_reason else "", r.message,
            )


class RedisNotifier:
    def __init__(self, redis: Any, channel_prefix: str) -> None:
        self._redis = redis
        self._prefix = channel_prefix

    def channel_for(self, result: ItemResult) -> str:
        return f"{self._prefix}:{result.user_id}:{result.event_id}"

    async def notify(self, results: list[ItemResult]) -> None:
        for r in results:
            channel = self.channel_for(r)
            try:
                await self._redis.publish(channel, json.dumps(result_payload(r)))
            except (RedisError, OSError) as exc:
                logger.warning("Publish to %s failed: %s", channel, exc)
                continue
            logger.debug("Published auto-book %s result to %s", r.auto_book_id, channel)
