# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Taskboard Server - Main FastAPI application."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from taskboard_server.config import settings
from taskboard_server.database import async_session_maker, init_db
from taskboard_server.errors import ServiceError
from taskboard_server.routers import tasks, users
from taskboard_server.services.verification import purge_expired_codes

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


async def purge_once() -> int:
    """Delete expired verification codes. Errors are logged, not raised."""
    try:
        async with async_session_maker() as db:
            removed = await purge_expired_codes(db)
    except Exception:
        logger.exception("Verification code purge failed")
        return 0
    if removed:
        logger.info("Purged %d expired verification codes", removed)
    return removed


async def purge_loop(interval_minutes: float) -> None:
    while True:
        await asyncio.sleep(interval_minutes * 60)
        await purge_once()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await init_db()
    if not settings.jwt_secret:
        logger.warning("JWT_SECRET not set - login will fail until it is configured")

    purge_task = None
    if settings.verification_purge_interval_minutes > 0:
        purge_task = asyncio.create_task(purge_loop(settings.verification_purge_interval_minutes))
    yield
    if purge_task:
        purge_task.cancel()
        with suppress(asyncio.CancelledError):
            await purge_task


app = FastAPI(
    title="Taskboard Server",
    description="User registration with email verification and per-user tasks",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status, and duration for each request (no body or auth headers)."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if not exc.expose:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are a plain 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors()), "error": "BadRequest"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database failures are answered inside the app so CORS headers still apply."""
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": "InternalError"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": "InternalError"},
    )


app.include_router(users.router, prefix="/api")
app.include_router(tasks.router, prefix="/api")


@app.get("/")
async def root():
    """Health check / API info."""
    return {
        "name": "Taskboard Server",
        "version": VERSION,
        "api": "/api",
        "docs": "/api/docs",
    }


@app.get("/api/health")
async def health():
    """Health check for load balancers."""
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
