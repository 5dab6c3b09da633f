# nomina/main.py
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

from nomina.core.errors import (
    DuplicateShiftDate,
    InvalidAdjustment,
    InvalidHoursOverride,
    InvalidShift,
    OutOfPeriodShift,
    PayrollInvariantError,
)
from nomina.core.holiday_calendar import HolidayCalendar
from nomina.core.logging_config import get_logger, setup_logging
from nomina.core.request_logging import RequestLoggingMiddleware
from nomina.core.sentry_config import capture_exception, init_sentry
from nomina.core.storage import get_payroll_settings
from nomina.database.database import create_tables, get_db
from nomina.routes.calculator import router as calculator_router
from nomina.routes.periods import router as periods_router

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
        extra={
            "extra_fields": {
                "production": os.getenv("PRODUCTION", "false").lower() == "true",
                "python_version": sys.version,
            }
        },
    )

    # Settings are validated at startup so a broken data file fails fast
    try:
        settings = get_payroll_settings()
    except Exception as e:
        logger.error("Payroll settings validation failed: %s", e, exc_info=True)
        raise

    app.state.holiday_calendar = HolidayCalendar.from_settings(settings)

    try:
        create_tables()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error("Failed to create database tables: %s", e, exc_info=True)
        raise

    yield

    logger.info("Application shutting down")


app = FastAPI(
    title="Nómina",
    description="Shift classification and biweekly payroll (quincena) calculation",
    version=VERSION,
    lifespan=lifespan,
)

# CORS Configuration
IS_PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]

if IS_PRODUCTION:
    if not CORS_ORIGINS:
        logger.warning(
            "Production mode but no CORS_ORIGINS set. CORS will block all cross-origin requests. "
            "Set CORS_ORIGINS environment variable if you need to allow specific origins."
        )
    allowed_origins = CORS_ORIGINS
    allowed_methods = ["GET", "POST", "PUT", "DELETE"]
    logger.info("CORS configured for production with origins: %s", allowed_origins)
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

app.include_router(calculator_router)
app.include_router(periods_router)


# ============ Payroll error mapping ============


def _error_response(status_code: int, error: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(error), "error": type(error).__name__})


@app.exception_handler(InvalidShift)
@app.exception_handler(InvalidAdjustment)
@app.exception_handler(InvalidHoursOverride)
async def invalid_input_handler(request: Request, exc: Exception):
    return _error_response(422, exc)


@app.exception_handler(DuplicateShiftDate)
@app.exception_handler(OutOfPeriodShift)
async def period_policy_handler(request: Request, exc: Exception):
    return _error_response(400, exc)


@app.exception_handler(PayrollInvariantError)
async def invariant_error_handler(request: Request, exc: PayrollInvariantError):
    logger.error("Payroll invariant violated on %s %s: %s", request.method, request.url.path, exc)
    if sentry_enabled:
        capture_exception(exc, {"request": {"method": request.method, "path": request.url.path}})
    return _error_response(500, exc)


@app.get("/health", tags=["health"])
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Returns 503 Service Unavailable if the database connection fails.
    """
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Health check failed - database connection error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "service": "nomina",
                "database": "disconnected",
                "error": "Database connection failed",
            },
        ) from e

    return {"status": "healthy", "service": "nomina", "version": VERSION, "database": "connected"}
