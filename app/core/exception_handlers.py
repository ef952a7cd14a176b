"""
Exception handlers for the hackathon API.
"""
import logging
from fastapi import Request, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import (
    LeaderboardException, ValidationError, EventNotFound,
    ProfileNotFound, NotFoundError, PersistenceError
)

logger = logging.getLogger(__name__)


def create_error_response(status_code: int, detail: str, error_code: str, request: Request) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "error_code": error_code,
            "request_id": getattr(request.state, 'request_id', None)
        }
    )


async def event_not_found_handler(request: Request, exc: EventNotFound) -> JSONResponse:
    """Handle event not found exceptions."""
    return create_error_response(404, str(exc), "EVENT_NOT_FOUND", request)


async def profile_not_found_handler(request: Request, exc: ProfileNotFound) -> JSONResponse:
    """Handle profile not found exceptions."""
    return create_error_response(404, str(exc), "PROFILE_NOT_FOUND", request)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return create_error_response(404, str(exc), "NOT_FOUND", request)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle domain validation errors raised past the request schema."""
    return create_error_response(400, str(exc), "INVALID_INPUT", request)


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Handle score store failures."""
    logger.error(f"Persistence failure: {exc}")
    return create_error_response(503, str(exc), "PERSISTENCE_ERROR", request)


async def leaderboard_exception_handler(request: Request, exc: LeaderboardException) -> JSONResponse:
    """Handle generic domain exceptions."""
    return create_error_response(400, str(exc), "BAD_REQUEST", request)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors with better formatting."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(x) for x in error["loc"][1:]),
            "message": error["msg"],
            "type": error["type"]
        })

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "errors": errors,
            "error_code": "VALIDATION_ERROR",
            "request_id": getattr(request.state, 'request_id', None)
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle generic HTTP exceptions."""
    return create_error_response(exc.status_code, exc.detail, f"HTTP_{exc.status_code}", request)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    # Don't expose internal errors in production
    if settings.DEBUG:
        detail = str(exc)
    else:
        detail = "An unexpected error occurred"

    return create_error_response(500, detail, "INTERNAL_ERROR", request)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(EventNotFound, event_not_found_handler)
    app.add_exception_handler(ProfileNotFound, profile_not_found_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(LeaderboardException, leaderboard_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
