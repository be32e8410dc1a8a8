# app/db/crud.py

# --- Core Imports ---
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure
import uuid
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone, time, date as date_type # Avoid naming conflict with datetime module
import logging
import re

# --- Database Access ---
from .database import get_database

# --- Models, Rules & Errors ---
from app.models.student import Student
from app.services import validation
from app.services.student_codes import STUDENT_CODE_PATTERN, student_code_sort_key
from app.core.exceptions import StudentValidationError, DuplicateStudentFieldError

# --- Logging Setup ---
logger = logging.getLogger(__name__)

# --- MongoDB Collection & Index Names ---
STUDENT_COLLECTION = "students"
CODE_INDEX_NAME = "uniq_student_code"
EMAIL_INDEX_NAME = "uniq_student_email"

# Fields never written through an update
PROTECTED_FIELDS = ("_id", "id", "code", "created_at", "updated_at")
SEARCH_FIELDS = ("code", "first_name", "last_name", "city", "district")

# --- Helper Functions ---
def _get_collection(collection_name: str) -> AsyncIOMotorCollection:
    db = get_database()
    if db is not None: return db[collection_name]
    logger.error("Database connection is not available (db object is None). Cannot get collection.")
    raise RuntimeError("Database connection not available")

def _to_bson_value(value: Any) -> Any:
    # BSON has no calendar date type; store midnight UTC
    if isinstance(value, date_type) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value

def _doc_to_fields(doc: Dict[str, Any]) -> Dict[str, Any]:
    mapped_data = {**doc}
    if "_id" in mapped_data: mapped_data["id"] = mapped_data.pop("_id")
    if isinstance(mapped_data.get("birth_date"), datetime):
        mapped_data["birth_date"] = mapped_data["birth_date"].date()
    return mapped_data

def _doc_to_student(doc: Dict[str, Any]) -> Student:
    return Student(**_doc_to_fields(doc))

def _raise_if_invalid(data: Dict[str, Any]) -> None:
    errors = validation.validate_student_fields(data)
    if errors:
        logger.warning(f"Store rejected student data, invalid fields: {sorted(errors)}")
        raise StudentValidationError(errors)

def _duplicate_field(exc: DuplicateKeyError) -> str:
    """Works out which unique field a DuplicateKeyError refers to."""
    details = exc.details or {}
    keys = {**(details.get("keyPattern") or {}), **(details.get("keyValue") or {})}
    if "email" in keys: return "email"
    if "code" in keys: return "code"
    message = str(exc)
    if EMAIL_INDEX_NAME in message or "email" in message: return "email"
    return "code"

# --- Index Management ---
async def ensure_student_indexes() -> None:
    """Creates the unique indexes on code and (present) email."""
    collection = _get_collection(STUDENT_COLLECTION)
    index_specs = [
        ("code", {"name": CODE_INDEX_NAME, "unique": True}),
        # Only string emails are indexed, so any number of records may omit it
        ("email", {"name": EMAIL_INDEX_NAME, "unique": True, "partialFilterExpression": {"email": {"$type": "string"}}}),
    ]
    for field, options in index_specs:
        try:
            await collection.create_index(field, **options)
            logger.info(f"Index '{options['name']}' on {STUDENT_COLLECTION}.{field} ensured (unique).")
        except OperationFailure as e:
            if e.code == 67: # CannotCreateIndex (Cosmos DB: unique index on non-empty collection)
                logger.warning(
                    f"Could not create unique index '{options['name']}' on {STUDENT_COLLECTION}.{field} "
                    f"because the collection is not empty (Cosmos DB restriction). "
                    f"Create it manually if it does not exist. Error: {e.details}"
                )
            elif e.code == 13: # Unauthorized (Cosmos DB: unique indexes cannot be modified)
                logger.warning(
                    f"Could not modify existing unique index '{options['name']}' on {STUDENT_COLLECTION}.{field}. "
                    f"Continuing startup. Error details: {e.details}"
                )
            else:
                raise

# --- Student CRUD Functions ---
async def get_max_student_code() -> Optional[str]:
    """Returns the numerically greatest stored student code, or None for an empty collection."""
    collection = _get_collection(STUDENT_COLLECTION)
    pipeline = [
        {"$match": {"code": {"$regex": STUDENT_CODE_PATTERN}}},
        {"$addFields": {"code_length": {"$strLenCP": "$code"}}},
        {"$sort": {"code_length": -1, "code": -1}},
        {"$limit": 1},
        {"$project": {"_id": 0, "code": 1}},
    ]
    docs = await collection.aggregate(pipeline).to_list(length=1)
    if not docs:
        return None
    return docs[0]["code"]

async def create_student(student_data: Dict[str, Any], code: str) -> Student:
    """
    Inserts a new student with the given code.

    Raises StudentValidationError if the data breaks a field rule and
    DuplicateStudentFieldError if the code or email is already taken.
    """
    collection = _get_collection(STUDENT_COLLECTION)
    _raise_if_invalid(student_data)

    now = datetime.now(timezone.utc)
    new_student_id = uuid.uuid4()
    student_doc = {
        field: _to_bson_value(value)
        for field, value in student_data.items()
        if value is not None and field not in PROTECTED_FIELDS
    }
    student_doc["_id"] = new_student_id
    student_doc["code"] = code
    student_doc["created_at"] = now
    student_doc["updated_at"] = now

    logger.info(f"Attempting to insert student {code} with internal ID: {new_student_id}")
    try:
        await collection.insert_one(student_doc)
    except DuplicateKeyError as e:
        field = _duplicate_field(e)
        logger.warning(f"Duplicate {field} on student create (code {code}).")
        raise DuplicateStudentFieldError(field) from e
    return _doc_to_student(student_doc)

async def get_student_by_id(student_id: uuid.UUID) -> Optional[Student]:
    collection = _get_collection(STUDENT_COLLECTION)
    logger.info(f"Getting student: {student_id}")
    student_doc = await collection.find_one({"_id": student_id})
    if student_doc:
        return _doc_to_student(student_doc)
    logger.warning(f"Student {student_id} not found."); return None

async def get_student_by_email(email: str, exclude_id: Optional[uuid.UUID] = None) -> Optional[Student]:
    """Looks up a student by normalized email, optionally ignoring one record."""
    collection = _get_collection(STUDENT_COLLECTION)
    query: Dict[str, Any] = {"email": email}
    if exclude_id is not None: query["_id"] = {"$ne": exclude_id}
    student_doc = await collection.find_one(query)
    return _doc_to_student(student_doc) if student_doc else None

async def get_all_students(search: Optional[str] = None) -> List[Student]:
    """
    Lists students sorted ascending by code. `search` is matched as a
    case-insensitive substring against code, names, city and district.
    """
    collection = _get_collection(STUDENT_COLLECTION); students_list: List[Student] = []
    filter_query: Dict[str, Any] = {}
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        filter_query = {"$or": [{field: pattern} for field in SEARCH_FIELDS]}
    logger.info(f"Getting all students filter={filter_query}")
    docs = await collection.find(filter_query).to_list(length=None)
    for doc in docs:
        try:
            students_list.append(_doc_to_student(doc))
        except Exception as validation_err:
            logger.error(f"Pydantic validation failed for student doc {doc.get('_id', 'UNKNOWN_ID')}: {validation_err}", exc_info=True)
    students_list.sort(key=lambda student: student_code_sort_key(student.code))
    return students_list

async def update_student(student_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Student]:
    """
    Merges `changes` onto the stored record and re-validates the result before
    committing. A None value unsets the field. Returns None if the student does
    not exist.
    """
    collection = _get_collection(STUDENT_COLLECTION); now = datetime.now(timezone.utc)
    update_data = {field: value for field, value in changes.items() if field not in PROTECTED_FIELDS}

    existing_doc = await collection.find_one({"_id": student_id})
    if existing_doc is None:
        logger.warning(f"Student {student_id} not found for update."); return None
    if not update_data:
        logger.warning(f"No update data provided for student {student_id}")
        return _doc_to_student(existing_doc)

    merged = {**_doc_to_fields(existing_doc), **update_data}
    _raise_if_invalid(merged)

    set_data = {field: _to_bson_value(value) for field, value in update_data.items() if value is not None}
    unset_data = {field: "" for field, value in update_data.items() if value is None}
    set_data["updated_at"] = now
    update_ops: Dict[str, Any] = {"$set": set_data}
    if unset_data: update_ops["$unset"] = unset_data

    logger.info(f"Updating student {student_id} fields={sorted(update_data)}")
    try:
        updated_doc = await collection.find_one_and_update(
            {"_id": student_id}, update_ops, return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError as e:
        field = _duplicate_field(e)
        logger.warning(f"Duplicate {field} on update of student {student_id}.")
        raise DuplicateStudentFieldError(field) from e
    if updated_doc is None:
        logger.warning(f"Student {student_id} was deleted before the update was applied."); return None
    return _doc_to_student(updated_doc)

async def delete_student(student_id: uuid.UUID) -> Optional[Student]:
    """Hard-deletes a student. Returns the deleted record, or None if it did not exist."""
    collection = _get_collection(STUDENT_COLLECTION)
    logger.info(f"Deleting student {student_id}")
    deleted_doc = await collection.find_one_and_delete({"_id": student_id})
    if deleted_doc is None:
        logger.warning(f"Student {student_id} not found for delete."); return None
    logger.info(f"Successfully deleted student {student_id} ({deleted_doc.get('code')})")
    return _doc_to_student(deleted_doc)
