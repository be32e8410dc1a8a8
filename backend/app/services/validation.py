# app/services/validation.py
"""
Field rules for student records.

This is the single rule set consumed by both the student service (which
fails fast with per-field feedback) and the store in app/db/crud.py (which
re-validates before every write). Each rule returns a `(passed, message)`
tuple; `message` is None when the rule passes.
"""
import re
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from app.models.enums import DISTRICT_NAMES

RuleResult = Tuple[bool, Optional[str]]

ALPHA_SPACE_PATTERN = re.compile(r"[A-Za-z\s]+")
CONTACT_NUMBER_PATTERN = re.compile(r"[0-9]{10}")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
CITY_MIN_LENGTH = 2
ADDRESS_LINE1_MIN_LENGTH = 5

# Fields that are trimmed on the way in; district and contact number must match exactly
STRING_FIELDS = (
    "first_name", "middle_name", "last_name", "address_line1", "address_line2",
    "city", "email",
)
# Optional fields where a blank value means "absent"
OPTIONAL_FIELDS = ("middle_name", "address_line2", "email")

PASS: RuleResult = (True, None)

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")

def validate_name(value: Optional[str], label: str = "Name") -> RuleResult:
    """First and last name: required, 2-50 characters, letters and spaces only."""
    if _is_blank(value):
        return False, f"{label} is required"
    trimmed = value.strip()
    if not NAME_MIN_LENGTH <= len(trimmed) <= NAME_MAX_LENGTH:
        return False, f"{label} must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters"
    if not ALPHA_SPACE_PATTERN.fullmatch(trimmed):
        return False, f"{label} must contain only alphabets"
    return PASS

def validate_middle_name(value: Optional[str]) -> RuleResult:
    if _is_blank(value):
        return PASS
    if not ALPHA_SPACE_PATTERN.fullmatch(value.strip()):
        return False, "Middle name must contain only alphabets"
    return PASS

def validate_city(value: Optional[str]) -> RuleResult:
    if _is_blank(value):
        return False, "City is required"
    trimmed = value.strip()
    if len(trimmed) < CITY_MIN_LENGTH:
        return False, f"City must be at least {CITY_MIN_LENGTH} characters"
    if not ALPHA_SPACE_PATTERN.fullmatch(trimmed):
        return False, "City must contain only alphabets"
    return PASS

def validate_district(value: Optional[str]) -> RuleResult:
    # Exact, case-sensitive membership
    if value not in DISTRICT_NAMES:
        return False, "District must be selected from the dropdown list"
    return PASS

def validate_contact_number(value: Optional[str]) -> RuleResult:
    if not isinstance(value, str) or not CONTACT_NUMBER_PATTERN.fullmatch(value):
        return False, "Contact number must be exactly 10 digits"
    return PASS

def normalize_email(value: Optional[str]) -> Optional[str]:
    """Trim and lower-case an email; blank becomes None."""
    if _is_blank(value):
        return None
    return value.strip().lower()

def validate_email(value: Optional[str]) -> RuleResult:
    email = normalize_email(value)
    if email is None:
        return PASS
    if not EMAIL_PATTERN.fullmatch(email):
        return False, "Email must be in a valid format"
    return PASS

def validate_address_line1(value: Optional[str]) -> RuleResult:
    if _is_blank(value):
        return False, "Address Line 1 is required"
    if len(value.strip()) < ADDRESS_LINE1_MIN_LENGTH:
        return False, f"Address Line 1 must be at least {ADDRESS_LINE1_MIN_LENGTH} characters"
    return PASS

def validate_birth_date(value: Optional[date], now: Optional[datetime] = None) -> RuleResult:
    """Birth date is required and must fall strictly before the current moment."""
    if value is None:
        return False, "Birth date is required"
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min, tzinfo=timezone.utc)
    else:
        return False, "Birth date must be a valid date"
    now = now or datetime.now(timezone.utc)
    if not moment < now:
        return False, "Birth date must be in the past"
    return PASS

def normalize_student_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Returns a copy of `data` with string fields trimmed, the email lower-cased,
    and blank optional fields set to None. Only keys already present are touched,
    so this is safe on partial update payloads.
    """
    normalized = dict(data)
    for field in STRING_FIELDS:
        if field in normalized and isinstance(normalized[field], str):
            normalized[field] = normalized[field].strip()
    for field in OPTIONAL_FIELDS:
        if field in normalized and _is_blank(normalized[field]):
            normalized[field] = None
    if "email" in normalized:
        normalized["email"] = normalize_email(normalized["email"])
    return normalized

def validate_student_fields(data: Mapping[str, Any], now: Optional[datetime] = None) -> Dict[str, str]:
    """
    Runs every field rule against a full student field set.

    Returns a mapping of field name to message for each failing field; an
    empty dict means the record is valid.
    """
    results = {
        "first_name": validate_name(data.get("first_name"), "First name"),
        "middle_name": validate_middle_name(data.get("middle_name")),
        "last_name": validate_name(data.get("last_name"), "Last name"),
        "birth_date": validate_birth_date(data.get("birth_date"), now=now),
        "address_line1": validate_address_line1(data.get("address_line1")),
        "city": validate_city(data.get("city")),
        "district": validate_district(data.get("district")),
        "contact_number": validate_contact_number(data.get("contact_number")),
        "email": validate_email(data.get("email")),
    }
    return {field: message for field, (passed, message) in results.items() if not passed}
