# students_api/core/handlers.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from students_api.core.exceptions import BaseAPIException, ValidationFailedException
from students_api.core.response import general_error, validation_error, write_json


def format_error_locations(errors) -> str:
    """Flatten pydantic error entries into "field: message; ..." text."""
    messages = []
    for error in errors:
        # Get field name (e.g., "body.email" or just "email")
        field = ".".join(str(x) for x in error["loc"] if x != "body")
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "; ".join(messages)


# 1. Errors raised on purpose by the request handlers
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    if isinstance(exc, ValidationFailedException):
        return write_json(exc.status_code, validation_error(exc.violations))
    return write_json(exc.status_code, general_error(exc.message))


# 2. Parameter errors detected by FastAPI itself
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return write_json(
        status.HTTP_400_BAD_REQUEST,
        general_error(format_error_locations(exc.errors())),
    )


# 3. Standard HTTP errors (unknown URL, wrong method, ...)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return write_json(exc.status_code, general_error(str(exc.detail)))


# 4. Anything else
async def general_exception_handler(request: Request, exc: Exception):
    request.app.state.logger.critical(f"Unhandled Exception: {exc}", exc_info=True)
    return write_json(status.HTTP_500_INTERNAL_SERVER_ERROR, general_error(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
