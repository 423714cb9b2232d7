"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.bk_autobook.api.router import router as auto_book_router
from src.bk_common.database import engine
from src.bk_common.errors import AppError
from src.bk_common.redis_client import close_redis, get_redis
from src.bk_common.response import error_response
from src.bk_event.api.router import router as event_router
from src.bk_gateway.middleware.request_log import RequestLogMiddleware
from src.bk_processing.api.router import router as processing_router
from src.bk_processing.application.scheduler import AutoBookScheduler
from src.bk_processing.application.service import run_pass_and_notify

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis, start the scheduler. Shutdown: reverse order."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()

    scheduler: AutoBookScheduler | None = None
    if settings.AUTOBOOK_SCHEDULER_ENABLED:
        scheduler = AutoBookScheduler(run_pass_and_notify, settings.AUTOBOOK_POLL_INTERVAL_SECONDS)
        scheduler.start()
    app.state.scheduler = scheduler
    yield
    if scheduler is not None:
        await scheduler.stop()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: [%d] %s", request.method, request.url.path, exc.code, exc.message)
    resp = error_response(exc.code, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(event_router, prefix="/api/v1")
app.include_router(auto_book_router, prefix="/api/v1")
app.include_router(processing_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
