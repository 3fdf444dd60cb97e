from typing import List

from fastapi import status

from students_api.schemas.validation import FieldViolation


class BaseAPIException(Exception):
    """
    Parent of every error a request handler raises on purpose.
    The exception handlers turn it into a JSON error envelope.
    """
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class BadRequestException(BaseAPIException):
    """400: empty or malformed body, missing or unparseable id"""
    def __init__(self, message: str = "Bad Request"):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST
        )


class ValidationFailedException(BaseAPIException):
    """400: the body decoded but broke one or more field constraints"""
    def __init__(self, violations: List[FieldViolation]):
        self.violations = violations
        super().__init__(
            message=", ".join(v.message for v in violations),
            status_code=status.HTTP_400_BAD_REQUEST
        )


class NotFoundException(BaseAPIException):
    """404: no record for the given id"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND
        )


class StorageException(BaseAPIException):
    """500: the store failed (unreachable, constraint violation, query error)"""
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
