import logging
from typing import List

from fastapi import APIRouter, Depends, status

from students_api.api.deps import get_logger, get_storage, get_student_id, read_student_payload
from students_api.core.exceptions import (
    NotFoundException,
    StorageException,
    ValidationFailedException,
)
from students_api.schemas.student import Student, StudentId, StudentPayload
from students_api.services.student.storage import (
    StorageError,
    StudentNotFoundError,
    StudentStorage,
)

router = APIRouter()


def _check_payload(payload: StudentPayload, logger: logging.Logger) -> None:
    violations = payload.validate_fields()
    if violations:
        logger.error(f"Error validating request: {[v.message for v in violations]}")
        raise ValidationFailedException(violations)


def _storage_failure(exc: StorageError, logger: logging.Logger, action: str):
    """Map a storage error to the API error the handler should raise."""
    logger.error(f"Error {action}: {exc}")
    if isinstance(exc, StudentNotFoundError):
        return NotFoundException(str(exc))
    return StorageException(str(exc))


@router.post("", response_model=StudentId, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentPayload = Depends(read_student_payload),
    storage: StudentStorage = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    """
    Create a student.

    - **name**: required
    - **email**: required, valid email, unique
    - **age**: required, non-zero

    Responds with the id assigned by the store.
    """
    _check_payload(payload, logger)
    student = payload.to_create()

    logger.info("Creating a student")
    try:
        student_id = storage.create_student(student.name, student.email, student.age)
    except StorageError as exc:
        raise _storage_failure(exc, logger, "creating student") from exc

    logger.info(f"Student created successfully, id={student_id}")
    return StudentId(id=student_id)


@router.get("", response_model=List[Student])
def get_students(
    storage: StudentStorage = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    """
    List all students. An empty store gives an empty list.
    """
    logger.info("Getting all students")
    try:
        return storage.get_students()
    except StorageError as exc:
        raise _storage_failure(exc, logger, "getting students") from exc


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int = Depends(get_student_id),
    storage: StudentStorage = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    """
    Get one student by id.
    """
    logger.info(f"Getting a student, id={student_id}")
    try:
        return storage.get_student_by_id(student_id)
    except StorageError as exc:
        raise _storage_failure(exc, logger, f"getting student {student_id}") from exc


@router.api_route("/{student_id}", methods=["PUT", "PATCH"], response_model=Student)
def update_student(
    student_id: int = Depends(get_student_id),
    payload: StudentPayload = Depends(read_student_payload),
    storage: StudentStorage = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    """
    Replace name, email and age of a student.

    Any `id` in the body is ignored: the record keeps the id from the path.
    """
    _check_payload(payload, logger)

    logger.info(f"Updating a student, id={student_id}")
    try:
        updated = storage.update_student_by_id(student_id, payload.to_update())
    except StorageError as exc:
        raise _storage_failure(exc, logger, f"updating student {student_id}") from exc

    return updated.model_copy(update={"id": student_id})


@router.delete("/{student_id}", response_model=StudentId)
def delete_student(
    student_id: int = Depends(get_student_id),
    storage: StudentStorage = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    """
    Delete a student.
    """
    logger.info(f"Deleting a student, id={student_id}")
    try:
        deleted_id = storage.delete_student_by_id(student_id)
    except StorageError as exc:
        raise _storage_failure(exc, logger, f"deleting student {student_id}") from exc

    logger.info(f"Student deleted successfully, id={deleted_id}")
    return StudentId(id=deleted_id)
