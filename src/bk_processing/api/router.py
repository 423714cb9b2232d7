"""bk_processing REST endpoints.

POST /processing/run   - operator-triggered pass (shielded from client disconnects)
"""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.bk_common.datetime_utils import utc_now
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.auth.dependencies import require_operator
from src.bk_processing.application.schemas import ProcessingSummaryResponse
from src.bk_processing.application.service import run_pass_and_notify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/processing", tags=["processing"])


@router.post("/run")
async def run_processing_pass(
    request: Request,
    operator_id: Annotated[str, Depends(require_operator)],
) -> ApiResponse:
    now = utc_now()
    logger.info("Manual pass triggered by %s at %s", operator_id, now)
    summary = await asyncio.shield(run_pass_and_notify(now))
    return success_response(ProcessingSummaryResponse.from_domain(summary).model_dump(), request)
