"""bk_event REST endpoints.

GET  /events                              - list (optional status filter)
GET  /events/{event_id}                   - detail
POST /events                              - create (operator)
POST /events/{event_id}/clone-for-testing - test copy releasing in N minutes (operator)
POST /events/{event_id}/release           - release now, then run a pass (operator)
"""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.datetime_utils import utc_now
from src.bk_common.response import ApiResponse, success_response
from src.bk_event.application.schemas import CloneEventRequest, CreateEventRequest
from src.bk_event.application.service import EventApplicationService
from src.bk_gateway.auth.dependencies import get_current_user_id, require_operator
from src.bk_processing.application.schemas import ProcessingSummaryResponse
from src.bk_processing.application.service import run_pass_and_notify

router = APIRouter(prefix="/events", tags=["events"])

_service = EventApplicationService()


@router.get("")
async def list_events(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="COMING_SOON | LIVE | SOLD_OUT | EXPIRED"),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_events(db, status, limit)
    return success_response(result.model_dump(), request)


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_event(db, event_id)
    return success_response(result.model_dump(), request)


@router.post("", status_code=201)
async def create_event(
    body: CreateEventRequest,
    request: Request,
    operator_id: Annotated[str, Depends(require_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_event(db, body, utc_now())
    return success_response(result.model_dump(), request)


@router.post("/{event_id}/clone-for-testing", status_code=201)
async def clone_event_for_testing(
    event_id: str,
    request: Request,
    operator_id: Annotated[str, Depends(require_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: CloneEventRequest | None = None,
) -> ApiResponse:
    body = body or CloneEventRequest()
    result = await _service.clone_for_testing(db, event_id, body.offset_minutes, utc_now())
    return success_response(result.model_dump(), request)


@router.post("/{event_id}/release")
async def release_event(
    event_id: str,
    request: Request,
    operator_id: Annotated[str, Depends(require_operator)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    now = utc_now()
    event = await _service.release_now(db, event_id, now)
    summary = await asyncio.shield(run_pass_and_notify(now))
    return success_response(
        {
            "event": event.model_dump(),
            "summary": ProcessingSummaryResponse.from_domain(summary).model_dump(),
        },
        request,
    )
