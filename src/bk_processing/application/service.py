# src/bk_processing/application/service.py
"""Trigger-side helpers: processor/notifier singletons and run_pass_and_notify.

`now` is read here, at the trigger, and passed into the processor.
"""

import logging
from datetime import datetime, timedelta

from config.settings import settings
from src.bk_common.database import async_session_factory
from src.bk_common.datetime_utils import utc_now
from src.bk_common.redis_client import get_redis
from src.bk_processing.domain.models import ProcessingSummary
from src.bk_processing.engine.processor import AutoBookProcessor
from src.bk_processing.infrastructure.notifier import (
    LoggingNotifier,
    NotifierProtocol,
    RedisNotifier,
)

logger = logging.getLogger(__name__)

_processor: AutoBookProcessor | None = None


def get_processor() -> AutoBookProcessor:
    global _processor  # noqa: PLW0603
    if _processor is None:
        _processor = AutoBookProcessor(
            async_session_factory,
            booking_window=timedelta(seconds=settings.BOOKING_WINDOW_SECONDS),
            batch_limit=settings.AUTOBOOK_BATCH_LIMIT,
        )
    return _processor


async def get_notifier() -> NotifierProtocol:
    if settings.NOTIFIER_BACKEND == "redis":
        return RedisNotifier(await get_redis(), settings.AUTOBOOK_RESULTS_CHANNEL_PREFIX)
    return LoggingNotifier()


async def run_pass_and_notify(
    now: datetime | None = None,
    processor: AutoBookProcessor | None = None,
    notifier: NotifierProtocol | None = None,
) -> ProcessingSummary:
    """Run one pass and hand its results to the notifier.

    Raises ProcessingPassError from the processor; notifier failures are logged only.
    """
    processor = processor or get_processor()
    summary = await processor.run_pass(now or utc_now())
    if summary.per_item_results:
        notifier = notifier or await get_notifier()
        try:
            await notifier.notify(summary.per_item_results)
        except Exception:
            logger.exception("Notifier failed for pass at %s", summary.processed_at)
    return summary
