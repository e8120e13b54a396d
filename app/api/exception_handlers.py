"""Global exception handlers that map exceptions to the uniform error envelope."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import (
    BAD_REQUEST,
    DUPLICATE_RESOURCE,
    FORBIDDEN,
    INTERNAL_ERROR,
    NOT_FOUND,
    TOKEN_EXPIRED,
    UNAUTHORIZED,
    VALIDATION_ERROR,
    BadRequestError,
    DomainValidationError,
    DuplicateResourceError,
    ForbiddenError,
    NotFoundError,
    TokenExpiredError,
    UnauthorizedError,
)
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

HTTP_422_UNPROCESSABLE = 422

# Domain exception -> (HTTP status, machine-readable code)
DOMAIN_ERRORS: dict[type[Exception], tuple[int, str]] = {
    DomainValidationError: (HTTP_422_UNPROCESSABLE, VALIDATION_ERROR),
    BadRequestError: (status.HTTP_400_BAD_REQUEST, BAD_REQUEST),
    UnauthorizedError: (status.HTTP_401_UNAUTHORIZED, UNAUTHORIZED),
    ForbiddenError: (status.HTTP_403_FORBIDDEN, FORBIDDEN),
    NotFoundError: (status.HTTP_404_NOT_FOUND, NOT_FOUND),
    DuplicateResourceError: (status.HTTP_409_CONFLICT, DUPLICATE_RESOURCE),
    TokenExpiredError: (status.HTTP_410_GONE, TOKEN_EXPIRED),
}

HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: FORBIDDEN,
    status.HTTP_404_NOT_FOUND: NOT_FOUND,
    status.HTTP_409_CONFLICT: DUPLICATE_RESOURCE,
    HTTP_422_UNPROCESSABLE: VALIDATION_ERROR,
}


def _error_response(
    status_code: int, detail: str, code: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Return a standardized error response with detail, code and status."""
    body = ErrorResponse(detail=detail, code=code, status=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def domain_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    for exc_type, (status_code, code) in DOMAIN_ERRORS.items():
        if isinstance(exc, exc_type):
            return _error_response(status_code, str(exc), code)
    return internal_error_handler(_request, exc)


def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return _error_response(
        HTTP_422_UNPROCESSABLE,
        "; ".join(messages) or "Invalid request",
        VALIDATION_ERROR,
    )


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(
        exc.status_code,
        str(exc.detail),
        HTTP_STATUS_CODES.get(exc.status_code, INTERNAL_ERROR if exc.status_code >= 500 else BAD_REQUEST),
        headers=getattr(exc, "headers", None),
    )


def internal_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        INTERNAL_ERROR,
    )


def register_exception_handlers(app):
    """Register exception handlers on the FastAPI app."""
    for exc_type in DOMAIN_ERRORS:
        app.add_exception_handler(exc_type, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, internal_error_handler)
