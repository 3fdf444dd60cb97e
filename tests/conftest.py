# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Shared fixtures: settings pointing at a throwaway SQLite file, the real
# storage adapter, and a TestClient wired to both.
# =============================================================================

import logging
from typing import List

import pytest
from fastapi.testclient import TestClient

from students_api.core.config import Settings
from students_api.main import create_app
from students_api.schemas.student import Student, StudentBase
from students_api.services.student.storage import StorageError
from students_api.services.student.student import SQLStudentStorage


class BrokenStorage:
    """Storage whose every call fails, for exercising the 500 paths."""

    def __init__(self, message: str = "database is locked"):
        self.message = message
        self.closed = False

    def create_student(self, name: str, email: str, age: int) -> int:
        raise StorageError(self.message)

    def get_student_by_id(self, student_id: int) -> Student:
        raise StorageError(self.message)

    def get_students(self) -> List[Student]:
        raise StorageError(self.message)

    def update_student_by_id(self, student_id: int, student: StudentBase) -> Student:
        raise StorageError(self.message)

    def delete_student_by_id(self, student_id: int) -> int:
        raise StorageError(self.message)

    def close(self) -> None:
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def logger():
    return logging.getLogger("students_api.tests")


@pytest.fixture
def settings(tmp_path):
    """Settings with storage in a per-test SQLite file."""
    return Settings(ENV="test", STORAGE_PATH=str(tmp_path / "students.db"))


@pytest.fixture
def storage(settings, logger):
    store = SQLStudentStorage.from_settings(settings, logger)
    yield store
    store.close()


@pytest.fixture
def client(settings, storage, logger):
    app = create_app(settings, storage, logger)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_client(settings, logger):
    app = create_app(settings, BrokenStorage(), logger)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def student_data():
    return {"name": "Alice Nguyen", "email": "alice@school.org", "age": 20}
