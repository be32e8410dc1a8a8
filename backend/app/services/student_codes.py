# app/services/student_codes.py
"""Sequential student code generation (STU_0001, STU_0002, ...)."""
from typing import Optional, Tuple

STUDENT_CODE_PREFIX = "STU_"
STUDENT_CODE_WIDTH = 4
# Well-formed codes only; anything else is ignored when finding the current maximum
STUDENT_CODE_PATTERN = f"^{STUDENT_CODE_PREFIX}[0-9]+$"
FIRST_SEQUENCE_NUMBER = 1

def format_student_code(number: int) -> str:
    """Zero-pads to 4 digits; longer numbers are kept whole (10000 -> STU_10000)."""
    return f"{STUDENT_CODE_PREFIX}{number:0{STUDENT_CODE_WIDTH}d}"

def parse_student_code(code: str) -> int:
    """Returns the sequence number of a code. Raises ValueError for malformed codes."""
    if not code or not code.startswith(STUDENT_CODE_PREFIX):
        raise ValueError(f"Invalid student code: {code!r}")
    suffix = code[len(STUDENT_CODE_PREFIX):]
    if not suffix.isdigit():
        raise ValueError(f"Invalid student code: {code!r}")
    return int(suffix)

def next_student_code(current_max_code: Optional[str]) -> str:
    """Derives the code following the current maximum; starts at STU_0001 when there is none."""
    if not current_max_code:
        return format_student_code(FIRST_SEQUENCE_NUMBER)
    return format_student_code(parse_student_code(current_max_code) + 1)

def student_code_sort_key(code: str) -> Tuple[int, str]:
    # Shorter codes have smaller numbers; within a length, string order is numeric order
    return (len(code), code)
