# students_api/core/response.py
from typing import Any, Iterable, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from students_api.schemas.validation import FieldViolation

STATUS_OK = "OK"
STATUS_ERROR = "Error"


class Response(BaseModel):
    """Envelope for responses that carry no domain payload."""
    status: str
    error: Optional[str] = None


def write_json(status_code: int, data: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def ok() -> dict:
    return Response(status=STATUS_OK).model_dump(exclude_none=True)


def general_error(error: Union[str, Exception]) -> dict:
    return Response(status=STATUS_ERROR, error=str(error)).model_dump()


def validation_error(violations: Iterable[FieldViolation]) -> dict:
    messages = [violation.message for violation in violations]
    return Response(status=STATUS_ERROR, error=", ".join(messages)).model_dump()
