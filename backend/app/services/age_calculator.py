# app/services/age_calculator.py
from datetime import date, datetime

# Ages are a snapshot as of this cohort date, not the current day.
AGE_REFERENCE_DATE = date(2025, 1, 1)

def calculate_age(birth_date: date, reference_date: date = AGE_REFERENCE_DATE) -> int:
    """
    Whole years between `birth_date` and the reference date.

    One year is subtracted when the birthday falls after the reference
    month/day, i.e. it has not yet occurred by the reference date.
    """
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()
    age = reference_date.year - birth_date.year
    if (reference_date.month, reference_date.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
