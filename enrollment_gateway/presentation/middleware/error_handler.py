"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from enrollment_gateway.domain.exceptions import (
    ConflictException,
    DomainException,
    NotFoundException,
    TransientException,
    UnauthorizedException,
    ValidationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_body(code: str, message: str) -> dict:
    return {
        "error": code,
        "message": message,
        "request_id": get_request_id(),
    }


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps each domain exception family to an HTTP status. Handlers
    match on the nearest base class, so subclasses need no entry.
    """

    @app.exception_handler(UnauthorizedException)
    async def unauthorized_handler(
        request: Request,
        exc: UnauthorizedException,
    ) -> JSONResponse:
        """Handle missing or invalid credentials."""
        return JSONResponse(
            status_code=401,
            content=_error_body(exc.code, exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle missing enrollments and payment dues."""
        return JSONResponse(
            status_code=404,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(ValidationException)
    async def validation_handler(
        request: Request,
        exc: ValidationException,
    ) -> JSONResponse:
        """Handle malformed input: unknown plan, bad capacity, amount mismatch."""
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(ConflictException)
    async def conflict_handler(
        request: Request,
        exc: ConflictException,
    ) -> JSONResponse:
        """Handle records already in a different or final state."""
        logger.info(
            "conflict",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=409,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(TransientException)
    async def transient_handler(
        request: Request,
        exc: TransientException,
    ) -> JSONResponse:
        """Handle gateway and record store outages."""
        logger.error(
            "transient_failure",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=503,
            content=_error_body(
                exc.code,
                "Service temporarily unavailable. Please try again.",
            ),
            headers={"Retry-After": "1"},
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )
