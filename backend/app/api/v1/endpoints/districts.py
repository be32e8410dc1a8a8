# app/api/v1/endpoints/districts.py

from typing import List
from fastapi import APIRouter, status

from app.models.enums import DISTRICT_NAMES

router = APIRouter(
    prefix="/districts",
    tags=["Districts"]
)

@router.get(
    "/",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
    summary="List the districts a student may belong to",
)
async def read_districts():
    """Returns the closed district list in canonical order, for form dropdowns."""
    return DISTRICT_NAMES
