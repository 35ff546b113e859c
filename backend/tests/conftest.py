"""Test fixtures for the backend."""
import os
from datetime import date
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_fleetoffice.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fleetoffice import models  # noqa: E402
from fleetoffice.config import get_settings  # noqa: E402
from fleetoffice.database import engine  # noqa: E402
from fleetoffice.dependencies import get_storage  # noqa: E402
from fleetoffice.main import app  # noqa: E402
from fleetoffice.storage import FileStorage, FileValidator  # noqa: E402


test_db_path = Path("test_fleetoffice.db")

VALID_FISCAL_CODES = ("RSSMRA85T10A562S", "VRDLGU80A01H501Q", "BNCGPP75M20F205E")


@pytest_asyncio.fixture(autouse=True)
async def prepare_database():
    """Give every test an empty schema."""

    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.drop_all)
    if test_db_path.exists():
        test_db_path.unlink()


@pytest_asyncio.fixture
async def storage(tmp_path) -> FileStorage:
    settings = get_settings()
    return FileStorage(tmp_path / "uploads", FileValidator(settings.max_upload_size, settings.max_image_size))


@pytest_asyncio.fixture
async def client(storage: FileStorage) -> AsyncClient:
    """Provide an HTTP client for integration tests, with uploads in a temp dir."""

    app.dependency_overrides[get_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


def employee_payload(index: int = 0, **overrides) -> dict:
    payload = {
        "first_name": ["Mario", "Luigi", "Giuseppe"][index],
        "last_name": ["Rossi", "Verdi", "Bianchi"][index],
        "birth_date": ["1985-12-10", "1980-01-01", "1975-08-20"][index],
        "fiscal_code": VALID_FISCAL_CODES[index],
        "email": f"employee{index}@example.com",
        "country_code": "IT",
        "postal_code": "00100",
    }
    payload.update(overrides)
    return payload


def vehicle_payload(plate: str = "AB123CD", **overrides) -> dict:
    payload = {"plate": plate, "brand": "Fiat", "model": "Panda", "current_mileage": 1000}
    payload.update(overrides)
    return payload


async def create_employee(client: AsyncClient, index: int = 0, **overrides) -> dict:
    response = await client.post("/fleet/employees/", json=employee_payload(index, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def create_vehicle(client: AsyncClient, plate: str = "AB123CD", **overrides) -> dict:
    response = await client.post("/fleet/vehicles/", json=vehicle_payload(plate, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def create_employment(client: AsyncClient, employee_id: int, matricola: str = "M001", **overrides) -> dict:
    payload = {"employee_id": employee_id, "matricola": matricola, "start_date": date.today().replace(day=1).isoformat()}
    payload.update(overrides)
    response = await client.post("/fleet/employments/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()
