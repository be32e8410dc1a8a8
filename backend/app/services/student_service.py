# app/services/student_service.py
"""
Create/update/delete/read flows for student records.

Fields are normalized and checked against the shared rule set before the
store is touched; the store re-validates and enforces code/email uniqueness
through unique indexes. Code assignment is "generate, insert, retry on
collision" because two concurrent creates can observe the same maximum code.
"""
import uuid
import logging
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import StudentValidationError, DuplicateStudentFieldError, StudentNotFoundError
from app.db import crud
from app.models.student import Student, StudentCreate, StudentFields, StudentUpdate
from app.services import validation
from app.services.age_calculator import calculate_age
from app.services.student_codes import next_student_code

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = tuple(StudentFields.model_fields)

async def _ensure_email_available(email: Optional[str], exclude_id: Optional[uuid.UUID] = None) -> None:
    if not email:
        return
    if await crud.get_student_by_email(email, exclude_id=exclude_id):
        logger.warning(f"Email '{email}' is already registered to another student.")
        raise DuplicateStudentFieldError("email")

async def create_student(student_in: StudentCreate) -> Student:
    student_data = validation.normalize_student_fields(student_in.model_dump(include=set(EDITABLE_FIELDS)))
    errors = validation.validate_student_fields(student_data)
    if errors:
        raise StudentValidationError(errors)

    await _ensure_email_available(student_data.get("email"))
    student_data["age"] = calculate_age(student_data["birth_date"])

    max_attempts = settings.STUDENT_CODE_MAX_ATTEMPTS
    for attempt in range(1, max_attempts + 1):
        code = next_student_code(await crud.get_max_student_code())
        try:
            created = await crud.create_student(student_data, code=code)
        except DuplicateStudentFieldError as e:
            if e.field != "code":
                raise
            logger.warning(f"Student code {code} was taken concurrently (attempt {attempt}/{max_attempts}); regenerating.")
            continue
        logger.info(f"Student created successfully: {created.code} ({created.id})")
        return created

    logger.error(f"Giving up on student create after {max_attempts} code collisions.")
    raise DuplicateStudentFieldError("code")

async def update_student(student_id: uuid.UUID, student_in: StudentUpdate) -> Student:
    """
    Applies the supplied fields onto an existing record. `code` is never
    changed; `age` is recomputed only when `birth_date` is part of the update.
    """
    existing = await crud.get_student_by_id(student_id)
    if existing is None:
        raise StudentNotFoundError(student_id)

    changes = validation.normalize_student_fields(
        student_in.model_dump(exclude_unset=True, include=set(EDITABLE_FIELDS))
    )
    merged = {**existing.model_dump(include=set(EDITABLE_FIELDS)), **changes}
    errors = validation.validate_student_fields(merged)
    if errors:
        raise StudentValidationError(errors)

    await _ensure_email_available(changes.get("email"), exclude_id=student_id)
    if "birth_date" in changes:
        changes["age"] = calculate_age(changes["birth_date"])

    updated = await crud.update_student(student_id, changes)
    if updated is None:
        raise StudentNotFoundError(student_id)
    logger.info(f"Student {updated.code} ({student_id}) updated, fields={sorted(changes)}")
    return updated

async def delete_student(student_id: uuid.UUID) -> Student:
    deleted = await crud.delete_student(student_id)
    if deleted is None:
        raise StudentNotFoundError(student_id)
    logger.info(f"Student {deleted.code} ({student_id}) deleted.")
    return deleted

async def get_student(student_id: uuid.UUID) -> Student:
    student = await crud.get_student_by_id(student_id)
    if student is None:
        raise StudentNotFoundError(student_id)
    return student

async def list_students(search: Optional[str] = None) -> List[Student]:
    search = search.strip() if search else None
    return await crud.get_all_students(search=search or None)
