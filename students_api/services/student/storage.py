"""Storage port for student records.

Request handlers only talk to this contract, so any store (relational,
document, in-memory) can back the API as long as it implements it.
"""

from abc import abstractmethod
from typing import List, Protocol

from students_api.schemas.student import Student, StudentBase


class StorageError(Exception):
    """Generic storage failure. The message carries the underlying cause."""


class StudentNotFoundError(StorageError):
    """No record matches the requested id."""

    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"no student found with ID {student_id}")


class StudentStorage(Protocol):
    """Persistence operations for students.

    Thread Safety:
        Implementations are shared by concurrent requests and must be
        safe to call from several threads at once.
    """

    @abstractmethod
    def create_student(self, name: str, email: str, age: int) -> int:
        """Insert a student and return the id assigned by the store.

        Raises:
            StorageError: If the insert fails (e.g. duplicate email).
        """
        ...

    @abstractmethod
    def get_student_by_id(self, student_id: int) -> Student:
        """Fetch one student.

        Raises:
            StudentNotFoundError: If no record has this id.
            StorageError: If the query fails.
        """
        ...

    @abstractmethod
    def get_students(self) -> List[Student]:
        """Return all students, an empty list when there are none."""
        ...

    @abstractmethod
    def update_student_by_id(self, student_id: int, student: StudentBase) -> Student:
        """Replace name, email and age of an existing student.

        Raises:
            StudentNotFoundError: If no record has this id.
            StorageError: If the update fails.
        """
        ...

    @abstractmethod
    def delete_student_by_id(self, student_id: int) -> int:
        """Delete a student and return its id.

        Raises:
            StudentNotFoundError: If no record has this id.
            StorageError: If the delete fails.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release connections held by the store."""
        ...
