"""bk_autobook REST endpoints.

POST   /auto-books                    - create
GET    /auto-books                    - list own (optional status filter)
GET    /auto-books/{auto_book_id}     - own detail
DELETE /auto-books/{auto_book_id}     - cancel while ACTIVE
POST   /auto-books/{auto_book_id}/dry-run - evaluate now without persisting
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_autobook.application.schemas import CreateAutoBookRequest
from src.bk_autobook.application.service import AutoBookApplicationService
from src.bk_common.database import get_db_session
from src.bk_common.datetime_utils import utc_now
from src.bk_common.response import ApiResponse, success_response
from src.bk_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/auto-books", tags=["auto-books"])

_service = AutoBookApplicationService()


@router.post("", status_code=201)
async def create_auto_book(
    body: CreateAutoBookRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_auto_book(db, user_id, body, utc_now())
    return success_response(result.model_dump(mode="json"), request)


@router.get("")
async def list_auto_books(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status: str | None = Query(None, description="ACTIVE | SUCCESS | FAILED"),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_auto_books(db, user_id, status, limit)
    return success_response(result.model_dump(mode="json"), request)


@router.get("/{auto_book_id}")
async def get_auto_book(
    auto_book_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_auto_book(db, user_id, auto_book_id)
    return success_response(result.model_dump(mode="json"), request)


@router.delete("/{auto_book_id}")
async def cancel_auto_book(
    auto_book_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.cancel_auto_book(db, user_id, auto_book_id)
    return success_response(result.model_dump(), request)


@router.post("/{auto_book_id}/dry-run")
async def dry_run_auto_book(
    auto_book_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.dry_run(db, user_id, auto_book_id, utc_now())
    return success_response(result.model_dump(mode="json"), request)
