import logging
from enum import StrEnum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from moments.errors import AuthenticationError, ConfigurationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class ErrorCode(StrEnum):
    """Machine-readable error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    SERVER_ERROR = "SERVER_ERROR"


def create_json_error_response(status_code: int, message: str, code: ErrorCode) -> JSONResponse:
    """Create JSON error response with a code for machine parsing. Error responses are never cached."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "code": code},
        headers=NO_CACHE_HEADERS,
    )


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
        code = ErrorCode.UNAUTHORIZED
    elif isinstance(exc, NotFoundError):
        status_code = 404
        code = ErrorCode.NOT_FOUND
    elif isinstance(exc, ValidationError):
        status_code = 400
        code = ErrorCode.BAD_REQUEST
    else:
        # Default for any other UserError subclass
        status_code = 400
        code = ErrorCode.BAD_REQUEST

    return create_json_error_response(status_code=status_code, message=str(exc), code=code)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Report malformed request bodies and parameters as 400."""
    message = "Invalid request"
    if isinstance(exc, RequestValidationError) and exc.errors():
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request: {location}: {first.get('msg', 'invalid value')}"
    return create_json_error_response(status_code=400, message=message, code=ErrorCode.BAD_REQUEST)


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> Response:
    """Render framework HTTP errors (unknown route, wrong method) in the standard error format."""
    if exc.status_code == 401:
        code = ErrorCode.UNAUTHORIZED
    elif exc.status_code == 404:
        code = ErrorCode.NOT_FOUND
    elif exc.status_code >= 500:
        code = ErrorCode.SERVER_ERROR
    else:
        code = ErrorCode.BAD_REQUEST

    response = create_json_error_response(status_code=exc.status_code, message=str(exc.detail), code=code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def configuration_error_handler(_: Request, exc: Exception) -> Response:
    """Handle missing deployment settings (500)."""
    logger.error("Configuration error: %s", exc)
    return create_json_error_response(status_code=500, message=str(exc), code=ErrorCode.CONFIGURATION_ERROR)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(status_code=500, message="An unexpected error occurred.", code=ErrorCode.SERVER_ERROR)
