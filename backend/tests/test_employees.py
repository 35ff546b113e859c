"""Integration tests for the employee and employment API."""
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from conftest import create_employee, create_employment, create_vehicle, employee_payload


@pytest.mark.asyncio
async def test_employee_create_list_and_search(client: AsyncClient) -> None:
    """Employees are created, paginated and searched by name."""

    role = await client.post("/fleet/employee-roles/", json={"name": "Driver"})
    assert role.status_code == 201
    created = await create_employee(client, 0, role_ids=[role.json()["id"]], fiscal_code="rssmra85t10a562s")
    await create_employee(client, 1)
    await create_employee(client, 2)

    assert created["full_name"] == "Mario Rossi"
    assert created["fiscal_code"] == "RSSMRA85T10A562S"
    assert [r["name"] for r in created["roles"]] == ["Driver"]

    page = (await client.get("/fleet/employees/", params={"page": 1, "size": 2})).json()
    assert page["total"] == 3
    assert [e["last_name"] for e in page["items"]] == ["Bianchi", "Rossi"]

    search = (await client.get("/fleet/employees/", params={"keyword": "verd"})).json()
    assert [e["first_name"] for e in search["items"]] == ["Luigi"]


@pytest.mark.asyncio
async def test_employee_uniqueness(client: AsyncClient) -> None:
    await create_employee(client, 0)

    same_code = await client.post("/fleet/employees/", json=employee_payload(1, fiscal_code="RSSMRA85T10A562S"))
    assert same_code.status_code == 409

    same_email = await client.post("/fleet/employees/", json=employee_payload(1, email="employee0@example.com"))
    assert same_email.status_code == 409
    assert same_email.json()["details"]["field"] == "email"


@pytest.mark.asyncio
async def test_employee_validation_collects_errors(client: AsyncClient) -> None:
    too_young = (date.today() - timedelta(days=365 * 10)).isoformat()
    response = await client.post(
        "/fleet/employees/",
        json=employee_payload(0, fiscal_code="RSSMRA85T10A562X", birth_date=too_young, postal_code="123"),
    )

    assert response.status_code == 400
    errors = response.json()["details"]["errors"]
    assert "Invalid fiscal code" in errors
    assert "Employee must be at least 16 years old" in errors
    assert "Italian postal code must be five digits" in errors


@pytest.mark.asyncio
async def test_employee_unknown_role_and_id(client: AsyncClient) -> None:
    response = await client.post("/fleet/employees/", json=employee_payload(0, role_ids=[99]))
    assert response.status_code == 404

    missing = await client.get("/fleet/employees/42")
    assert missing.status_code == 404
    assert missing.json()["error"] == "NotFoundError"


@pytest.mark.asyncio
async def test_employee_form_style_update(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)

    response = await client.post(
        f"/fleet/employees/{employee['id']}/edit",
        json=employee_payload(0, phone="+39 (06) 123-4567", notes="Night shift"),
    )
    assert response.status_code == 200
    assert response.json()["notes"] == "Night shift"
    assert response.json()["phone"] == "+39 (06) 123-4567"

    # keeping its own email and fiscal code is not a duplicate
    put = await client.put(f"/fleet/employees/{employee['id']}", json=employee_payload(0))
    assert put.status_code == 200


@pytest.mark.asyncio
async def test_employee_delete_cascades(client: AsyncClient, storage) -> None:
    employee = await create_employee(client, 0)
    employment = await create_employment(client, employee["id"])
    vehicle = await create_vehicle(client)
    assignment = await client.post(
        "/fleet/assignments/",
        json={"employment_id": employment["id"], "vehicle_id": vehicle["id"], "start_date": date.today().isoformat()},
    )
    assert assignment.status_code == 201
    card = await client.post("/fleet/fuel-cards/", json={"card_number": "C-1", "employee_id": employee["id"]})
    assert card.status_code == 201
    report = await client.post(
        "/fleet/expense-reports/",
        json={"employee_id": employee["id"], "items": [{"description": "Taxi", "amount": 12}]},
    )
    assert report.status_code == 201
    assert (storage.root / "employees" / str(employee["id"]) / "docs").is_dir()

    response = await client.post(f"/fleet/employees/{employee['id']}/delete")
    assert response.status_code == 204

    assert (await client.get(f"/fleet/employees/{employee['id']}")).status_code == 404
    assert (await client.get(f"/fleet/employments/{employment['id']}")).status_code == 404
    assert (await client.get("/fleet/expense-reports/")).json() == []
    assert (await client.get(f"/fleet/fuel-cards/{card.json()['id']}")).json()["employee_id"] is None
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["status"] == "IN_SERVICE"
    assert not (storage.root / "employees" / str(employee["id"]) / "docs").exists()


@pytest.mark.asyncio
async def test_available_and_without_fuel_card(client: AsyncClient) -> None:
    busy = await create_employee(client, 0)
    free = await create_employee(client, 1)
    await create_employment(client, busy["id"])
    await client.post("/fleet/fuel-cards/", json={"card_number": "C-9", "employee_id": free["id"]})

    available = (await client.get("/fleet/employees/available")).json()
    assert [e["id"] for e in available] == [free["id"]]

    without_card = (await client.get("/fleet/employees/without-fuel-card")).json()
    assert [e["id"] for e in without_card] == [busy["id"]]


@pytest.mark.asyncio
async def test_employment_lifecycle(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    past = await create_employment(
        client,
        employee["id"],
        "M-OLD",
        start_date="2020-01-01",
        end_date="2021-01-01",
    )
    assert past["status"] == "TERMINATED"

    current = await create_employment(client, employee["id"], "M-NEW")
    duplicate = await client.post(
        "/fleet/employments/",
        json={"employee_id": employee["id"], "matricola": "M-NEW", "start_date": "2022-01-01"},
    )
    assert duplicate.status_code == 409

    counts = (await client.get("/fleet/employments/count-by-status")).json()
    assert counts["ACTIVE"] == 1 and counts["TERMINATED"] == 1

    by_employee = (await client.get(f"/fleet/employments/by-employee/{employee['id']}")).json()
    assert [e["matricola"] for e in by_employee] == ["M-NEW", "M-OLD"]

    early = await client.post(f"/fleet/employments/{current['id']}/terminate", json={"end_date": "2000-01-01"})
    assert early.status_code == 400

    done = await client.post(
        f"/fleet/employments/{current['id']}/terminate", json={"end_date": date.today().isoformat()}
    )
    assert done.status_code == 200
    assert done.json()["status"] == "TERMINATED"


@pytest.mark.asyncio
async def test_matricola_must_be_path_safe(client: AsyncClient, storage) -> None:
    employee = await create_employee(client, 0)

    for matricola in ("../../..", "..", "a/b", "M 1"):
        response = await client.post(
            "/fleet/employments/",
            json={"employee_id": employee["id"], "matricola": matricola, "start_date": "2024-01-01"},
        )
        assert response.status_code == 422, matricola

    assert (await client.get("/fleet/employments/")).json() == []
    assert not (storage.root / "docs").exists()

    created = await create_employment(client, employee["id"], "M_01-A")
    assert (storage.root / "employments" / "M_01-A" / "docs").is_dir()
    assert created["matricola"] == "M_01-A"


@pytest.mark.asyncio
async def test_terminate_rejected_while_vehicle_assigned(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    employment = await create_employment(client, employee["id"])
    vehicle = await create_vehicle(client)
    await client.post(
        "/fleet/assignments/",
        json={"employment_id": employment["id"], "vehicle_id": vehicle["id"], "start_date": date.today().isoformat()},
    )

    response = await client.post(
        f"/fleet/employments/{employment['id']}/terminate", json={"end_date": date.today().isoformat()}
    )
    assert response.status_code == 400
    assert response.json()["details"]["errors"] == ["Employment still has assigned vehicles"]
