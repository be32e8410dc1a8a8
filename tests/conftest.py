# tests/conftest.py
import pytest
import pytest_asyncio
import logging
import uuid
from datetime import date, datetime, timezone
from typing import AsyncGenerator, Dict, Any
from fastapi import FastAPI
from asgi_lifespan import LifespanManager
from httpx import AsyncClient, ASGITransport
from pytest_mock import MockerFixture

from app.models.student import Student

logger = logging.getLogger(__name__)

# --- Fixtures ---

@pytest_asyncio.fixture(scope="function")
async def app(mocker: MockerFixture) -> AsyncGenerator[FastAPI, None]:
    """Creates the FastAPI app for each test function, mocking startup/shutdown database work."""
    logger.info("Mocking DB connect/disconnect and index creation for app fixture...")
    mocker.patch("app.main.connect_to_mongo", return_value=True)
    mocker.patch("app.main.close_mongo_connection", return_value=None)
    mocker.patch("app.main.ensure_student_indexes", return_value=None)

    # Import the app *after* patching dependencies
    from app.main import app as fastapi_app

    async with LifespanManager(fastapi_app, startup_timeout=15, shutdown_timeout=15):
        yield fastapi_app


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
        yield async_client


@pytest.fixture
def sample_student_payload() -> Dict[str, Any]:
    return {
        "first_name": "Nimal",
        "middle_name": "Kumara",
        "last_name": "Perera",
        "birth_date": "2007-01-01",
        "address_line1": "12 Temple Road",
        "address_line2": "Peradeniya",
        "city": "Kandy",
        "district": "Kandy",
        "contact_number": "0771234567",
        "email": "Nimal.Perera@Example.com",
    }


@pytest.fixture
def make_student():
    """Factory for Student models as the store would return them."""
    def _make(**overrides: Any) -> Student:
        now = datetime.now(timezone.utc)
        data: Dict[str, Any] = {
            "id": uuid.uuid4(),
            "code": "STU_0001",
            "first_name": "Nimal",
            "last_name": "Perera",
            "birth_date": date(2007, 1, 1),
            "age": 18,
            "address_line1": "12 Temple Road",
            "city": "Kandy",
            "district": "Kandy",
            "contact_number": "0771234567",
            "email": "nimal.perera@example.com",
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return Student(**data)
    return _make
