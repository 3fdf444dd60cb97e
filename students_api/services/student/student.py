import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from students_api.core.config import Settings
from students_api.core.database import (
    build_engine,
    build_session_factory,
    check_database_connection,
    create_database_tables,
)
from students_api.models.student import Student as StudentModel
from students_api.schemas.student import Student, StudentBase
from students_api.services.student.storage import StorageError, StudentNotFoundError


def _describe(exc: SQLAlchemyError) -> str:
    # Prefer the driver's message over SQLAlchemy's wrapper text
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class SQLStudentStorage:
    """
    Relational implementation of `StudentStorage` on top of SQLAlchemy.

    Every operation runs in its own transaction: it either commits as a whole
    or is rolled back, including when the calling request is cancelled.
    """

    def __init__(self, engine: Engine, logger: logging.Logger):
        self._engine = engine
        self._session_factory = build_session_factory(engine)
        self._logger = logger

    @classmethod
    def from_settings(cls, settings: Settings, logger: logging.Logger) -> "SQLStudentStorage":
        """
        Open the pool, check the connection and make sure the schema exists.

        Raises:
            StorageError: if the database cannot be opened or the table created
        """
        try:
            engine = build_engine(settings, logger)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to open database: {_describe(exc)}") from exc

        try:
            check_database_connection(engine)
            create_database_tables(engine, logger)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise StorageError(f"failed to create students table: {_describe(exc)}") from exc

        return cls(engine, logger)

    def create_student(self, name: str, email: str, age: int) -> int:
        db_student = StudentModel(name=name, email=email, age=age)
        try:
            with self._session_factory.begin() as db:
                db.add(db_student)
                db.flush()
                student_id = db_student.id
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to create student: {_describe(exc)}") from exc
        return student_id

    def get_student_by_id(self, student_id: int) -> Student:
        stmt = select(StudentModel).where(StudentModel.id == student_id).limit(1)
        try:
            with self._session_factory() as db:
                db_student = db.execute(stmt).scalar_one_or_none()
                if db_student is None:
                    raise StudentNotFoundError(student_id)
                return Student.model_validate(db_student)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to get student {student_id}: {_describe(exc)}") from exc

    def get_students(self) -> List[Student]:
        stmt = select(StudentModel).order_by(StudentModel.id)
        try:
            with self._session_factory() as db:
                return [Student.model_validate(row) for row in db.execute(stmt).scalars()]
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to get students: {_describe(exc)}") from exc

    def update_student_by_id(self, student_id: int, student: StudentBase) -> Student:
        # The matched row count is the existence check, so there is no
        # window between checking and writing
        stmt = (
            update(StudentModel)
            .where(StudentModel.id == student_id)
            .values(name=student.name, email=student.email, age=student.age)
        )
        try:
            with self._session_factory.begin() as db:
                result = db.execute(stmt)
                if result.rowcount == 0:
                    raise StudentNotFoundError(student_id)
                return Student.model_validate(db.get(StudentModel, student_id))
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to update student {student_id}: {_describe(exc)}") from exc

    def delete_student_by_id(self, student_id: int) -> int:
        stmt = delete(StudentModel).where(StudentModel.id == student_id)
        try:
            with self._session_factory.begin() as db:
                result = db.execute(stmt)
                if result.rowcount == 0:
                    raise StudentNotFoundError(student_id)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to delete student {student_id}: {_describe(exc)}") from exc
        return student_id

    def close(self) -> None:
        self._logger.info("Closing database connections")
        self._engine.dispose()
