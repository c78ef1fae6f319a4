# app/main.py
"""
FastAPI application entry point for the CrewPlan payroll service.
"""

import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import WAGE_SUPPLEMENTS_FILE
from app.core.holidays import HolidayCalendar
from app.core.logging_config import get_logger, setup_logging
from app.core.request_logging import RequestLoggingMiddleware
from app.core.sentry_config import capture_configuration_error, init_sentry
from app.core.storage import StorageError
from app.core.validators import InvalidIntervalError, InvalidRuleConfigurationError
from app.routes.payroll_api import router as payroll_router

# Logging must be configured before anything logs
setup_logging()
logger = get_logger(__name__)

sentry_enabled = init_sentry()

APP_VERSION = "0.1.0"
IS_PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"


def cors_settings() -> tuple[list[str], list[str]]:
    """
    Allowed origins and methods.

    Production only allows origins listed in CORS_ORIGINS (comma separated)
    and the two methods the API uses. Development allows everything.
    """
    if not IS_PRODUCTION:
        logger.info("CORS configured for development (permissive)")
        return ["*"], ["*"]

    origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]
    if not origins:
        logger.warning("Production mode without CORS_ORIGINS: all cross-origin requests will be blocked")
    else:
        logger.info(f"CORS configured for production with origins: {origins}")
    return origins, ["GET", "POST"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "CrewPlan payroll starting",
        extra={
            "extra_fields": {
                "production": IS_PRODUCTION,
                "python_version": sys.version,
                "sentry_enabled": sentry_enabled,
                "wage_supplements_file": str(WAGE_SUPPLEMENTS_FILE),
            }
        },
    )

    # Shared by all requests; years are computed on first use
    app.state.holiday_calendar = HolidayCalendar()

    yield

    logger.info(
        "CrewPlan payroll shutting down",
        extra={"extra_fields": {"cached_holiday_years": app.state.holiday_calendar.cached_years()}},
    )


app = FastAPI(
    title="CrewPlan Payroll",
    description="Norwegian holiday calendar, wage supplement and payroll calculation",
    version=APP_VERSION,
    lifespan=lifespan,
)

allowed_origins, allowed_methods = cors_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=allowed_methods,
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(payroll_router)


@app.exception_handler(InvalidIntervalError)
async def invalid_interval_handler(request: Request, exc: InvalidIntervalError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(InvalidRuleConfigurationError)
async def invalid_rule_handler(request: Request, exc: InvalidRuleConfigurationError):
    # Reported to Sentry as well as returned to the caller
    capture_configuration_error(exc, {"wage_supplement": {"rule": exc.rule_name, "reason": exc.reason}})
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "rule": exc.rule_name, "error": "invalid_configuration"},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Wage supplement configuration could not be loaded: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Wage supplement configuration unavailable"})


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "crewplan-payroll", "version": APP_VERSION}
