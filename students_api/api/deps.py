import logging
import re

from fastapi import Depends, Request
from pydantic import ValidationError

from students_api.core.exceptions import BadRequestException
from students_api.core.handlers import format_error_locations
from students_api.schemas.student import StudentPayload
from students_api.services.student.storage import StudentStorage

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def get_storage(request: Request) -> StudentStorage:
    """Storage shared by all requests, attached to the app at startup."""
    return request.app.state.storage


def get_logger(request: Request) -> logging.Logger:
    return request.app.state.logger


def get_student_id(student_id: str) -> int:
    """
    Parse the {student_id} path segment as a 64-bit integer.
    """
    if not student_id.strip():
        raise BadRequestException("id is required")
    if not _INT_PATTERN.fullmatch(student_id):
        raise BadRequestException(f"invalid id {student_id!r}: must be an integer")

    value = int(student_id)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise BadRequestException(f"invalid id {student_id!r}: out of range")
    return value


async def read_student_payload(
    request: Request,
    logger: logging.Logger = Depends(get_logger),
) -> StudentPayload:
    """
    Decode the JSON body into a `StudentPayload`.

    Only the shape is checked here; field constraints are left to the handler.
    """
    body = await request.body()
    if not body.strip():
        logger.error("Error decoding JSON: empty body")
        raise BadRequestException("empty body")

    try:
        return StudentPayload.model_validate_json(body)
    except ValidationError as exc:
        message = format_error_locations(exc.errors())
        logger.error(f"Error decoding JSON: {message}")
        raise BadRequestException(message) from exc
