"""Exception-to-HTTP mappings for the Ordering API.

Every failure is rendered in the same envelope as a success,
``{"success": false, "message": ..., "errors": [...]}``. Missing orders and
orders the caller may not see share one fixed message.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from ordering.exceptions import AuthenticationError, ConflictError, ForbiddenError

logger = structlog.get_logger(__name__)

NOT_FOUND_MESSAGE = "Order not found"

_STATUS_CODES = {
    AuthenticationError: 401,
    ForbiddenError: 403,
    ConflictError: 409,
}


def _envelope(status_code: int, message: str, errors: list[str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": None, "message": message, "errors": errors or []},
    )


def _flatten(messages) -> list[str]:
    if isinstance(messages, dict):
        return [f"{field}: {message}" for field, values in messages.items() for message in _as_list(values)]
    return [str(message) for message in _as_list(messages)]


def _as_list(values):
    return values if isinstance(values, (list, tuple)) else [values]


def register_exception_handlers(app: FastAPI) -> None:
    """Register the Ordering error envelope on ``app``."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _envelope(400, "Invalid order data", _flatten(exc.messages))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
            for error in exc.errors()
        ]
        return _envelope(400, "Invalid request", errors)

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return _envelope(404, NOT_FOUND_MESSAGE)

    async def mapped_error_handler(request: Request, exc: Exception) -> JSONResponse:
        status_code = next(code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls))
        logger.warning("Order request rejected", path=request.url.path, status_code=status_code, error=str(exc))
        return _envelope(status_code, str(exc))

    for exc_class in _STATUS_CODES:
        app.add_exception_handler(exc_class, mapped_error_handler)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", path=request.url.path)
        return _envelope(500, "An unexpected error occurred")
