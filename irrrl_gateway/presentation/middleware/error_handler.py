"""Exception handlers mapping domain errors to HTTP responses."""

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from irrrl_gateway.domain.exceptions import (
    ApplicationNotFoundException,
    DomainException,
    InvalidApplicationRequestException,
    InvalidStoredStatusException,
    MissingPrerequisiteDataException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)

# Most specific first; anything else derived from DomainException is a 400
STATUS_BY_EXCEPTION: Dict[Type[DomainException], int] = {
    ApplicationNotFoundException: 404,
    MissingPrerequisiteDataException: 422,
    InvalidApplicationRequestException: 400,
    InvalidStoredStatusException: 500,
}


def error_body(code: str, message: str) -> dict:
    return {"error": code, "message": message, "request_id": get_request_id()}


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Rejected status transitions are not exceptions; the transitions
    endpoint answers those with 409 itself.
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        status_code = next(
            (
                status
                for exc_type, status in STATUS_BY_EXCEPTION.items()
                if isinstance(exc, exc_type)
            ),
            400,
        )
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
            status_code=status_code,
        )
        return JSONResponse(
            status_code=status_code,
            content={**exc.to_dict(), "request_id": get_request_id()},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )
