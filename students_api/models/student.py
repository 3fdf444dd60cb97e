from sqlalchemy import BigInteger, CheckConstraint, Column, Integer, String

from students_api.core.database import Base

# SQLite only treats a column declared exactly INTEGER PRIMARY KEY as the rowid alias
StudentIdType = BigInteger().with_variant(Integer, "sqlite")


class Student(Base):
    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("age > 0", name="ck_students_age_positive"),
        # AUTOINCREMENT keeps deleted ids from being handed out again
        {"sqlite_autoincrement": True},
    )

    id = Column(StudentIdType, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    age = Column(Integer, nullable=False)
