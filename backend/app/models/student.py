# app/models/student.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import Optional
from datetime import date, datetime, timezone
import uuid

# Editable fields. Every field is optional at the type level so that missing
# values are reported by the shared rule set (app/services/validation.py) as
# per-field messages instead of schema errors.
class StudentFields(BaseModel):
    first_name: Optional[str] = Field(default=None, description="Student's first name (2-50 letters)")
    middle_name: Optional[str] = Field(default=None, description="Student's middle name (Optional)")
    last_name: Optional[str] = Field(default=None, description="Student's last name (2-50 letters)")
    birth_date: Optional[date] = Field(default=None, description="Date of birth, must be in the past")
    address_line1: Optional[str] = Field(default=None, description="First address line (at least 5 characters)")
    address_line2: Optional[str] = Field(default=None, description="Second address line (Optional)")
    city: Optional[str] = Field(default=None, description="City (letters only)")
    district: Optional[str] = Field(default=None, description="One of the 25 fixed districts")
    contact_number: Optional[str] = Field(default=None, description="Exactly 10 digits")
    email: Optional[str] = Field(default=None, description="Student's email address (Optional, unique)")

    # `code` and `age` are server-derived; unknown keys in a payload are dropped
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


# Properties accepted on creation
class StudentCreate(StudentFields):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "first_name": "Nimal",
                "last_name": "Perera",
                "birth_date": "2007-01-01",
                "address_line1": "12 Temple Road",
                "city": "Kandy",
                "district": "Kandy",
                "contact_number": "0771234567",
                "email": "nimal.perera@example.com",
            }
        }
    )


# Partial update. Only fields present in the payload are applied (exclude_unset).
class StudentUpdate(StudentFields):
    pass


# Properties stored in DB
class StudentInDBBase(BaseModel):
    # Use 'id' in Python, map to '_id' in MongoDB via alias.
    id: uuid.UUID = Field(default_factory=uuid.uuid4, alias="_id", description="Internal unique identifier")
    code: str = Field(..., description="Immutable student code, e.g. STU_0001")

    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    birth_date: date
    age: int = Field(..., description="Age as of the fixed reference date")
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    district: str
    contact_number: str
    email: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Timestamp when the student record was created")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Timestamp when the student record was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


# Final model representing a Student read from DB (returned by API)
class Student(StudentInDBBase):

    @computed_field
    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(part for part in parts if part)


class StudentDeleteResponse(BaseModel):
    message: str
    student: Student
