# app/core/exceptions.py
"""
Domain exceptions raised by the student services and store.

The API layer maps these onto HTTP responses (see app/main.py), so the
same error vocabulary reaches callers whichever layer detected the problem.
"""
import uuid
from typing import Dict

class StudentRecordError(Exception):
    """Base class for student record errors."""
    pass

class StudentValidationError(StudentRecordError):
    """Raised when one or more fields fail the student rule set."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Validation failed for fields: {', '.join(sorted(self.errors))}")

class DuplicateStudentFieldError(StudentRecordError):
    """
    Raised when a unique field (student code or email) is already taken.

    A collision on `code` is recoverable (regenerate and retry); a collision
    on `email` is a user error.
    """

    MESSAGES = {
        "code": ("Student code already exists", "This student code is already in use"),
        "email": ("Email already exists", "This email is already registered"),
    }

    def __init__(self, field: str):
        self.field = field
        self.summary, self.field_message = self.MESSAGES.get(
            field, (f"{field} already exists", f"This {field} is already in use")
        )
        super().__init__(self.summary)

class StudentNotFoundError(StudentRecordError):
    """Raised when an operation references a student id that does not exist."""

    def __init__(self, student_id: uuid.UUID):
        self.student_id = student_id
        super().__init__(f"Student with ID {student_id} not found.")
