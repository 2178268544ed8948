"""FastAPI application setup."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from bunlint.api.exceptions import (
    DailyLimitExceededError,
    FeatureUnavailableError,
    InvalidAccessCodeError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from bunlint.api.response import error_response, user_facing_message
from bunlint.api.routes import ai_check, diff, health, high_accuracy, history, stats, transform
from bunlint.db.mongo import close_database
from bunlint.llm import (
    AiCheckParseError,
    ConfigurationError,
    LLMError,
    RateLimitError,
    StyleComplianceError,
)
from bunlint.services.history_service import HistoryQueryError

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    yield
    # Shutdown
    await close_database()


app = FastAPI(
    title="Bunlint API",
    description="Backend API for Japanese sentence-ending style transforms",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
        if origin.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _llm_error_code(exc: LLMError) -> str:
    if isinstance(exc, ConfigurationError):
        return "AI_NOT_CONFIGURED"
    if isinstance(exc, RateLimitError):
        return "AI_RATE_LIMITED"
    if isinstance(exc, StyleComplianceError):
        return "STYLE_COMPLIANCE_FAILED"
    if isinstance(exc, AiCheckParseError):
        return "AI_CHECK_PARSE_ERROR"
    return "AI_SERVICE_ERROR"


# Exception handlers
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=error_response("VALIDATION_ERROR", exc.message),
    )


@app.exception_handler(UnsupportedMediaTypeError)
async def unsupported_media_type_handler(request: Request, exc: UnsupportedMediaTypeError) -> JSONResponse:
    """Handle non-JSON bodies sent to JSON-only endpoints."""
    return JSONResponse(
        status_code=415,
        content=error_response("UNSUPPORTED_MEDIA_TYPE", exc.message),
    )


@app.exception_handler(DailyLimitExceededError)
async def daily_limit_handler(request: Request, exc: DailyLimitExceededError) -> JSONResponse:
    """Handle once-per-day features used twice."""
    return JSONResponse(
        status_code=429,
        content=error_response(
            "DAILY_LIMIT_EXCEEDED",
            exc.message,
            details={"lastCheckedAt": exc.last_checked_at} if exc.last_checked_at else None,
        ),
    )


@app.exception_handler(FeatureUnavailableError)
async def feature_unavailable_handler(request: Request, exc: FeatureUnavailableError) -> JSONResponse:
    """Handle features disabled by configuration."""
    return JSONResponse(
        status_code=503,
        content=error_response("FEATURE_UNAVAILABLE", exc.message),
    )


@app.exception_handler(InvalidAccessCodeError)
async def invalid_access_code_handler(request: Request, exc: InvalidAccessCodeError) -> JSONResponse:
    """Handle wrong unlock codes."""
    return JSONResponse(
        status_code=401,
        content=error_response("INVALID_ACCESS_CODE", exc.message),
    )


@app.exception_handler(HistoryQueryError)
async def history_error_handler(request: Request, exc: HistoryQueryError) -> JSONResponse:
    """Handle history store failures."""
    logger.error("History query failed: %s", exc.message)
    return JSONResponse(
        status_code=500,
        content=error_response("HISTORY_ERROR", "履歴の処理に失敗しました。"),
    )


@app.exception_handler(ServerSelectionTimeoutError)
async def mongo_timeout_handler(request: Request, exc: ServerSelectionTimeoutError) -> JSONResponse:
    """Handle MongoDB connection timeout."""
    return JSONResponse(
        status_code=503,
        content=error_response("DATABASE_UNAVAILABLE", "Database is not available. Please try again later."),
    )


@app.exception_handler(ConnectionFailure)
async def mongo_connection_handler(request: Request, exc: ConnectionFailure) -> JSONResponse:
    """Handle MongoDB connection failure."""
    return JSONResponse(
        status_code=503,
        content=error_response("DATABASE_UNAVAILABLE", "Database connection failed. Please try again later."),
    )


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError) -> JSONResponse:
    """Handle Gemini and style-compliance errors."""
    logger.warning(
        "AI request failed: %s",
        str(exc),
        extra={
            "correlation_id": exc.correlation_id,
            "status": exc.status,
            "error_type": type(exc).__name__,
        },
    )

    details = None
    if isinstance(exc, StyleComplianceError) and exc.offending_sentences:
        details = {"offendingSentences": exc.offending_sentences}

    return JSONResponse(
        status_code=exc.status,
        content=error_response(_llm_error_code(exc), user_facing_message(exc), details=details),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle anything the other handlers do not."""
    logger.exception("Unexpected error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_response("INTERNAL_ERROR", "予期せぬエラーが発生しました。"),
    )


# Register routes
app.include_router(health.router)
app.include_router(transform.router, prefix="/api")
app.include_router(ai_check.router, prefix="/api")
app.include_router(high_accuracy.router, prefix="/api")
app.include_router(history.router, prefix="/api")
app.include_router(stats.router, prefix="/api")
app.include_router(diff.router, prefix="/api")
