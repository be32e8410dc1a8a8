# tests/functional/services/test_student_codes.py
import re
import pytest

from app.services.student_codes import (
    format_student_code,
    next_student_code,
    parse_student_code,
    student_code_sort_key,
    STUDENT_CODE_PATTERN,
)

def test_first_code_when_no_students_exist():
    assert next_student_code(None) == "STU_0001"
    assert next_student_code("") == "STU_0001"

def test_sequence_from_empty_store():
    codes = []
    current = None
    for _ in range(3):
        current = next_student_code(current)
        codes.append(current)
    assert codes == ["STU_0001", "STU_0002", "STU_0003"]

def test_next_code_after_existing_max():
    assert next_student_code("STU_0042") == "STU_0043"
    assert next_student_code("STU_0999") == "STU_1000"

def test_padding_does_not_truncate_past_four_digits():
    assert format_student_code(1) == "STU_0001"
    assert format_student_code(10000) == "STU_10000"
    assert next_student_code("STU_9999") == "STU_10000"

@pytest.mark.parametrize("code", ["STU_", "STU_12a4", "ABC_0001", "0001"])
def test_parse_rejects_malformed_codes(code):
    with pytest.raises(ValueError):
        parse_student_code(code)

def test_sort_key_orders_numerically():
    codes = ["STU_10000", "STU_0002", "STU_9999", "STU_0010"]
    assert sorted(codes, key=student_code_sort_key) == ["STU_0002", "STU_0010", "STU_9999", "STU_10000"]

@pytest.mark.parametrize("code, matches", [
    ("STU_0042", True),
    ("STU_10000", True),
    ("STU_ABCD", False),
    ("STU_12a4", False),
    ("STU_", False),
])
def test_code_pattern_only_accepts_numeric_codes(code, matches):
    assert (re.match(STUDENT_CODE_PATTERN, code) is not None) is matches
