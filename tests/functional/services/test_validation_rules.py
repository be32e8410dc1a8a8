# tests/functional/services/test_validation_rules.py
import pytest
from datetime import date, datetime, timedelta, timezone

from app.models.enums import DISTRICT_NAMES
from app.services import validation

# --- Test Data ---
VALID_FIELDS = {
    "first_name": "Nimal",
    "middle_name": None,
    "last_name": "Perera",
    "birth_date": date(2007, 1, 1),
    "address_line1": "12 Temple Road",
    "address_line2": None,
    "city": "Kandy",
    "district": "Kandy",
    "contact_number": "0771234567",
    "email": None,
}

# --- Name Rules ---
@pytest.mark.parametrize("value", ["Al", "Mary Ann", "  Nimal  ", "A" * 50])
def test_validate_name_accepts_letters_and_spaces(value):
    assert validation.validate_name(value, "First name") == (True, None)

@pytest.mark.parametrize("value, expected", [
    (None, "First name is required"),
    ("   ", "First name is required"),
    ("A", "First name must be 2-50 characters"),
    ("A" * 51, "First name must be 2-50 characters"),
    ("Nimal2", "First name must contain only alphabets"),
    ("O'Neil", "First name must contain only alphabets"),
])
def test_validate_name_rejections(value, expected):
    assert validation.validate_name(value, "First name") == (False, expected)

def test_middle_name_is_optional_but_alphabetic():
    assert validation.validate_middle_name(None) == (True, None)
    assert validation.validate_middle_name("") == (True, None)
    assert validation.validate_middle_name("K") == (True, None) # No length bound
    passed, message = validation.validate_middle_name("K.")
    assert not passed
    assert message == "Middle name must contain only alphabets"

# --- City / Address ---
def test_validate_city():
    assert validation.validate_city("Nuwara Eliya") == (True, None)
    assert validation.validate_city("") == (False, "City is required")
    assert validation.validate_city("K") == (False, "City must be at least 2 characters")
    assert validation.validate_city("Kandy 1") == (False, "City must contain only alphabets")

def test_validate_address_line1():
    assert validation.validate_address_line1("12 Temple Road") == (True, None)
    assert validation.validate_address_line1("  12A  ")[0] is False
    assert validation.validate_address_line1(None) == (False, "Address Line 1 is required")

# --- District ---
def test_district_list_has_25_entries():
    assert len(DISTRICT_NAMES) == 25
    assert len(set(DISTRICT_NAMES)) == 25

@pytest.mark.parametrize("value, passed", [
    ("Colombo", True),
    ("Nuwara Eliya", True),
    ("colombo", False),
    ("Atlantis", False),
    (" Colombo", False),
    (None, False),
])
def test_validate_district(value, passed):
    assert validation.validate_district(value)[0] is passed

# --- Contact Number ---
@pytest.mark.parametrize("value", ["12345", "abcdefghij", "123456789012", "077-1234567", "+94771234567", None])
def test_validate_contact_number_rejects(value):
    assert validation.validate_contact_number(value) == (False, "Contact number must be exactly 10 digits")

def test_validate_contact_number_accepts_ten_digits():
    assert validation.validate_contact_number("0771234567") == (True, None)

def test_validate_contact_number_rejects_non_ascii_digits():
    # Arabic-Indic digits match \d but are not ASCII
    assert validation.validate_contact_number("٠٧٧١٢٣٤٥٦٧")[0] is False

# --- Email ---
def test_normalize_email():
    assert validation.normalize_email("  Nimal.Perera@Example.COM ") == "nimal.perera@example.com"
    assert validation.normalize_email("   ") is None
    assert validation.normalize_email(None) is None

@pytest.mark.parametrize("value, passed", [
    (None, True),
    ("", True),
    ("nimal@example.com", True),
    ("  NIMAL@EXAMPLE.LK ", True),
    ("nimal@example", False),
    ("nimal example@mail.com", False),
    ("@example.com", False),
    ("nimal@@example.com", False),
])
def test_validate_email(value, passed):
    assert validation.validate_email(value)[0] is passed

# --- Birth Date ---
def test_validate_birth_date_required():
    assert validation.validate_birth_date(None) == (False, "Birth date is required")

def test_validate_birth_date_must_be_in_past():
    now = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
    assert validation.validate_birth_date(date(2025, 6, 14), now=now) == (True, None)
    assert validation.validate_birth_date(date(2025, 6, 16), now=now) == (False, "Birth date must be in the past")

def test_validate_birth_date_uses_wall_clock_by_default():
    tomorrow = datetime.now(timezone.utc).date() + timedelta(days=1)
    assert validation.validate_birth_date(tomorrow)[0] is False

# --- Whole Record ---
def test_validate_student_fields_valid_record():
    assert validation.validate_student_fields(VALID_FIELDS) == {}

def test_validate_student_fields_reports_each_failing_field():
    data = {**VALID_FIELDS, "first_name": "", "district": "Atlantis", "contact_number": "12345", "email": "bad"}
    errors = validation.validate_student_fields(data)
    assert set(errors) == {"first_name", "district", "contact_number", "email"}
    assert errors["district"] == "District must be selected from the dropdown list"

def test_validate_student_fields_empty_payload_flags_required_fields():
    errors = validation.validate_student_fields({})
    assert set(errors) == {
        "first_name", "last_name", "birth_date", "address_line1", "city", "district", "contact_number",
    }

def test_normalize_student_fields_only_touches_present_keys():
    normalized = validation.normalize_student_fields({"first_name": "  Nimal ", "email": " A@B.COM ", "middle_name": "  "})
    assert normalized == {"first_name": "Nimal", "email": "a@b.com", "middle_name": None}
    assert validation.normalize_student_fields({"city": " Kandy"}) == {"city": "Kandy"}

@pytest.mark.parametrize("field, padded", [
    ("district", " Colombo "),
    ("contact_number", " 0771234567 "),
])
def test_exact_match_fields_are_not_trimmed(field, padded):
    normalized = validation.normalize_student_fields({**VALID_FIELDS, field: padded})

    assert normalized[field] == padded
    assert field in validation.validate_student_fields(normalized)
