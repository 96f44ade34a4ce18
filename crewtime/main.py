# crewtime/main.py
"""
FastAPI application entry point.
"""

import os
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from crewtime.core.config import IS_PRODUCTION
from crewtime.core.exceptions import (
    InvalidDateRange,
    InvalidDuration,
    InvalidPagination,
    NotFound,
    StoreUnavailable,
    TimesheetError,
)
from crewtime.core.logging_config import get_logger, setup_logging
from crewtime.core.request_logging import RequestLoggingMiddleware
from crewtime.core.sentry_config import capture_exception, init_sentry
from crewtime.database.database import create_tables, get_db
from crewtime.routes.timesheets import router as timesheets_router

VERSION = "0.1.0"

# Setup logging FIRST (before any other imports that might log)
setup_logging()
logger = get_logger(__name__)

sentry_enabled = init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Application starting up",
        extra={"extra_fields": {"production": IS_PRODUCTION, "python_version": sys.version}},
    )

    try:
        create_tables()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)
        raise

    yield

    logger.info("Application shutting down")


app = FastAPI(
    title="Crewtime",
    description="Workforce time aggregation and billing",
    version=VERSION,
    lifespan=lifespan,
)

# CORS Configuration
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]

if IS_PRODUCTION:
    if not CORS_ORIGINS:
        logger.warning(
            "Production mode but no CORS_ORIGINS set. CORS will block all cross-origin requests. "
            "Set CORS_ORIGINS environment variable if you need to allow specific origins."
        )
    allowed_origins = CORS_ORIGINS
    allowed_methods = ["GET"]
    logger.info(f"CORS configured for production with origins: {allowed_origins}")
else:
    allowed_origins = ["*"]
    allowed_methods = ["*"]
    logger.info("CORS configured for development (permissive)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=allowed_methods,
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(timesheets_router)


# Domain error -> HTTP mapping, the only place status codes are decided
ERROR_STATUS_CODES: dict[type[TimesheetError], int] = {
    InvalidDateRange: 400,
    InvalidDuration: 400,
    InvalidPagination: 400,
    NotFound: 404,
    StoreUnavailable: 503,
}


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "status_code": status_code},
    )


@app.exception_handler(TimesheetError)
async def timesheet_error_handler(request: Request, exc: TimesheetError):
    status_code = 500
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        if sentry_enabled:
            capture_exception(exc, {"request": {"path": request.url.path}})
        message = "Timesheet store unavailable" if isinstance(exc, StoreUnavailable) else "Internal error"
        return error_response(message, status_code)

    return error_response(exc.message, status_code)


@app.get("/health", tags=["health"])
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Returns 200 if the database answers, 503 otherwise.
    """
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check failed - database connection error: {e}", exc_info=True)
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "service": "crewtime",
                "database": "disconnected",
            },
        ) from e

    return {
        "status": "healthy",
        "service": "crewtime",
        "version": VERSION,
        "database": "connected",
    }
