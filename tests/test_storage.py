# =============================================================================
# tests/test_storage.py - SQLStudentStorage against a real SQLite file
# =============================================================================

import pytest
from sqlalchemy import inspect

from students_api.core.config import Settings
from students_api.schemas.student import StudentUpdate
from students_api.services.student.storage import StorageError, StudentNotFoundError
from students_api.services.student.student import SQLStudentStorage


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Tests for opening the store and bootstrapping the schema."""

    def test_creates_students_table(self, storage):
        inspector = inspect(storage._engine)

        assert "students" in inspector.get_table_names()
        columns = {c["name"] for c in inspector.get_columns("students")}
        assert columns == {"id", "name", "email", "age"}

    def test_schema_bootstrap_is_idempotent(self, settings, logger, storage):
        storage.create_student("Bob", "bob@school.org", 19)

        reopened = SQLStudentStorage.from_settings(settings, logger)
        try:
            assert [s.name for s in reopened.get_students()] == ["Bob"]
        finally:
            reopened.close()

    def test_unreachable_location_fails_fast(self, tmp_path, logger):
        settings = Settings(
            ENV="test",
            STORAGE_PATH=str(tmp_path / "missing-dir" / "students.db"),
        )

        with pytest.raises(StorageError):
            SQLStudentStorage.from_settings(settings, logger)

    def test_pool_is_bounded(self, storage, settings):
        pool = storage._engine.pool

        assert pool.size() == settings.DB_POOL_SIZE
        assert pool._max_overflow == settings.DB_MAX_OVERFLOW
        assert pool._recycle == settings.DB_POOL_RECYCLE


# =============================================================================
# Create / Read
# =============================================================================

class TestCreateAndGet:
    """Tests for create_student, get_student_by_id and get_students."""

    def test_create_returns_positive_id(self, storage):
        student_id = storage.create_student("Bob", "bob@school.org", 19)

        assert student_id > 0

    def test_get_returns_created_record(self, storage):
        student_id = storage.create_student("Bob", "bob@school.org", 19)

        student = storage.get_student_by_id(student_id)

        assert student.id == student_id
        assert (student.name, student.email, student.age) == ("Bob", "bob@school.org", 19)

    def test_get_missing_raises_not_found(self, storage):
        with pytest.raises(StudentNotFoundError) as exc_info:
            storage.get_student_by_id(404)

        assert exc_info.value.student_id == 404
        assert str(exc_info.value) == "no student found with ID 404"

    def test_list_empty_store(self, storage):
        assert storage.get_students() == []

    def test_list_returns_all_records(self, storage):
        storage.create_student("Bob", "bob@school.org", 19)
        storage.create_student("Cara", "cara@school.org", 21)

        students = storage.get_students()

        assert [s.email for s in students] == ["bob@school.org", "cara@school.org"]

    def test_duplicate_email_is_storage_error(self, storage):
        storage.create_student("Bob", "bob@school.org", 19)

        with pytest.raises(StorageError) as exc_info:
            storage.create_student("Robert", "bob@school.org", 30)

        assert not isinstance(exc_info.value, StudentNotFoundError)
        assert "UNIQUE" in str(exc_info.value)

    def test_schema_rejects_non_positive_age(self, storage):
        with pytest.raises(StorageError) as exc_info:
            storage.create_student("Bob", "bob@school.org", -1)

        assert "CHECK" in str(exc_info.value)
        assert storage.get_students() == []

    def test_name_with_sql_is_stored_verbatim(self, storage):
        name = "Robert'); DROP TABLE students;--"

        student_id = storage.create_student(name, "bobby@school.org", 10)

        assert storage.get_student_by_id(student_id).name == name


# =============================================================================
# Update
# =============================================================================

class TestUpdate:
    """Tests for update_student_by_id."""

    def test_update_replaces_fields(self, storage):
        student_id = storage.create_student("Bob", "bob@school.org", 19)

        updated = storage.update_student_by_id(
            student_id, StudentUpdate(name="Robert", email="robert@school.org", age=20)
        )

        assert updated.id == student_id
        assert (updated.name, updated.email, updated.age) == ("Robert", "robert@school.org", 20)
        assert storage.get_student_by_id(student_id) == updated

    def test_update_missing_raises_not_found(self, storage):
        with pytest.raises(StudentNotFoundError):
            storage.update_student_by_id(
                99, StudentUpdate(name="Ghost", email="ghost@school.org", age=30)
            )

        assert storage.get_students() == []

    def test_update_to_taken_email_is_storage_error(self, storage):
        storage.create_student("Bob", "bob@school.org", 19)
        cara_id = storage.create_student("Cara", "cara@school.org", 21)

        with pytest.raises(StorageError):
            storage.update_student_by_id(
                cara_id, StudentUpdate(name="Cara", email="bob@school.org", age=21)
            )

        assert storage.get_student_by_id(cara_id).email == "cara@school.org"


# =============================================================================
# Delete
# =============================================================================

class TestDelete:
    """Tests for delete_student_by_id."""

    def test_delete_removes_record(self, storage):
        student_id = storage.create_student("Bob", "bob@school.org", 19)

        assert storage.delete_student_by_id(student_id) == student_id
        with pytest.raises(StudentNotFoundError):
            storage.get_student_by_id(student_id)

    def test_delete_missing_leaves_state_untouched(self, storage):
        student_id = storage.create_student("Bob", "bob@school.org", 19)

        with pytest.raises(StudentNotFoundError):
            storage.delete_student_by_id(student_id + 1)

        assert [s.id for s in storage.get_students()] == [student_id]

    def test_ids_are_not_reused_after_delete(self, storage):
        first_id = storage.create_student("Bob", "bob@school.org", 19)
        storage.delete_student_by_id(first_id)

        second_id = storage.create_student("Bob", "bob@school.org", 19)

        assert second_id > first_id
