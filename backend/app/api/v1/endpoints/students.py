# app/api/v1/endpoints/students.py

import uuid
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, status, Query

from app.models.student import Student, StudentCreate, StudentUpdate, StudentDeleteResponse
from app.services import student_service
from app.core.exceptions import StudentNotFoundError

# Setup logger for this module
logger = logging.getLogger(__name__)

# Create the router instance
router = APIRouter(
    prefix="/students",
    tags=["Students"]
)

# Validation (400) and duplicate (409) errors raised by the service are
# turned into responses by the exception handlers registered in app/main.py.

def _not_found(exc: StudentNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

@router.post(
    "/",
    response_model=Student,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new student",
    description=(
        "Creates a new student record. The student code and age are derived by the server. "
        "Returns 400 with per-field messages on invalid data and 409 if the email is already registered."
    ),
)
async def create_new_student(student_in: StudentCreate):
    logger.info(f"Attempting to create student: {student_in.first_name} {student_in.last_name}")
    return await student_service.create_student(student_in)

@router.get(
    "/",
    response_model=List[Student],
    status_code=status.HTTP_200_OK,
    summary="Get a list of students",
    description="Retrieves all students sorted by code, optionally filtered by a free-text search.",
)
async def read_students(
    search: Optional[str] = Query(None, description="Case-insensitive match on code, first/last name, city or district"),
):
    return await student_service.list_students(search=search)

@router.get(
    "/{student_id}",
    response_model=Student,
    status_code=status.HTTP_200_OK,
    summary="Get a specific student by internal ID",
)
async def read_student(student_id: uuid.UUID):
    try:
        return await student_service.get_student(student_id)
    except StudentNotFoundError as e:
        raise _not_found(e)

@router.put(
    "/{student_id}",
    response_model=Student,
    status_code=status.HTTP_200_OK,
    summary="Update an existing student",
    description=(
        "Updates the supplied fields of an existing student. The student code cannot be changed "
        "and is ignored if present. Returns 404 if the student is not found."
    ),
)
async def update_existing_student(student_id: uuid.UUID, student_in: StudentUpdate):
    logger.info(f"Attempting to update student internal ID: {student_id}")
    try:
        return await student_service.update_student(student_id, student_in)
    except StudentNotFoundError as e:
        raise _not_found(e)

@router.delete(
    "/{student_id}",
    response_model=StudentDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a student",
    description="Permanently deletes a student record and returns it. Returns 404 if the student is not found.",
)
async def delete_existing_student(student_id: uuid.UUID):
    logger.info(f"Attempting to delete student internal ID: {student_id}")
    try:
        deleted = await student_service.delete_student(student_id)
    except StudentNotFoundError as e:
        raise _not_found(e)
    return StudentDeleteResponse(message="Student deleted successfully", student=deleted)
