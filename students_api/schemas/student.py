from typing import Annotated, ClassVar, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from students_api.schemas.validation import EMAIL, REQUIRED, FieldViolation, Rule, check_fields

# Values outside this range cannot be stored in an INTEGER column
Int64 = Annotated[StrictInt, Field(ge=-(2 ** 63), le=2 ** 63 - 1)]


class StudentPayload(BaseModel):
    """
    Request body as sent by the client.

    Every field is optional at decode time; presence and format are checked
    afterwards by `validate_fields`. Types are strict so `"age": "20"` is a
    decode error rather than a silent conversion.
    """

    id: Optional[Int64] = None
    name: Optional[StrictStr] = None
    email: Optional[StrictStr] = None
    age: Optional[Int64] = None

    constraints: ClassVar[Dict[str, Sequence[Rule]]] = {
        "name": (REQUIRED,),
        "email": (REQUIRED, EMAIL),
        "age": (REQUIRED,),
    }

    model_config = ConfigDict(extra="ignore")

    def validate_fields(self) -> List[FieldViolation]:
        """Return every broken constraint, empty when the payload is valid."""
        return check_fields(self.model_dump(), self.constraints)

    def to_create(self) -> "StudentCreate":
        """Only valid after `validate_fields` passes. `id` is dropped."""
        return StudentCreate(name=self.name, email=self.email, age=self.age)

    def to_update(self) -> "StudentUpdate":
        return StudentUpdate(name=self.name, email=self.email, age=self.age)


class StudentBase(BaseModel):
    name: str
    email: str
    age: int


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    pass


class StudentInDB(StudentBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class Student(StudentInDB):
    pass


class StudentId(BaseModel):
    id: int
