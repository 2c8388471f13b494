"""Error taxonomy for the request pipeline and the JSON handlers that render it"""
from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.responses import write_json

logger = getLogger(__name__)


class UsersAPIError(Exception):
    """Base for every error surfaced to callers as {"error": message}"""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class DecodeError(UsersAPIError):
    """Request body is not valid JSON for the expected shape"""
    status_code = 400
    default_message = "Invalid JSON"


class ValidationError(UsersAPIError):
    """Well-formed body missing a required field"""
    status_code = 400
    default_message = "Name and email required"


class NotFoundError(UsersAPIError):
    status_code = 404
    default_message = "User not found"


class StoreError(UsersAPIError):
    """Persistence operation failed. The cause is chained and only ever logged"""
    status_code = 500
    default_message = "Database error"


async def users_api_error_handler(request: Request, exc: UsersAPIError):
    """Render a domain error as a JSON envelope"""
    if isinstance(exc, StoreError):
        logger.error("Store error on %s %s: %s",
                     request.method, request.url.path, exc.message, exc_info=exc)
    return write_json({"error": exc.message}, exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Reshape router-level errors into the same envelope"""
    if exc.status_code == 404:
        return write_json({"error": "Not found", "path": request.url.path}, 404)
    if exc.status_code == 405:
        return write_json({"error": "Method not allowed"}, 405, headers=exc.headers)
    return write_json({"error": str(exc.detail)}, exc.status_code, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug("Request validation failed: %s", exc.errors())
    return write_json({"error": "Invalid request"}, 400)


def register_exception_handlers(app: FastAPI) -> None:
    """Convert every expected failure to {"error": ...} at the handler boundary"""
    app.add_exception_handler(UsersAPIError, users_api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
