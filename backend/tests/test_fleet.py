"""Integration tests for vehicles, assignments, maintenance and fuel."""
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from conftest import create_employee, create_employment, create_vehicle

TODAY = date.today()
YESTERDAY = TODAY - timedelta(days=1)


async def _assign(client: AsyncClient, employment_id: int, vehicle_id: int, **overrides):
    payload = {"employment_id": employment_id, "vehicle_id": vehicle_id, "start_date": TODAY.isoformat()}
    payload.update(overrides)
    return await client.post("/fleet/assignments/", json=payload)


@pytest.mark.asyncio
async def test_vehicle_plate_rules(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client, "ab 123 cd", chassis_number="zfa31200000123456")
    assert vehicle["plate"] == "AB123CD"
    assert vehicle["chassis_number"] == "ZFA31200000123456"

    invalid = await client.post("/fleet/vehicles/", json={"plate": "X1", "brand": "Fiat", "model": "Uno"})
    assert invalid.status_code == 400
    assert invalid.json()["details"]["errors"] == ["Invalid plate format: X1"]

    duplicate = await client.post("/fleet/vehicles/", json={"plate": "AB123CD", "brand": "Fiat", "model": "Uno"})
    assert duplicate.status_code == 409

    same_chassis = await client.post(
        "/fleet/vehicles/",
        json={"plate": "EF456GH", "brand": "Fiat", "model": "Uno", "chassis_number": "ZFA31200000123456"},
    )
    assert same_chassis.status_code == 409

    unknown_supplier = await client.post(
        "/fleet/vehicles/", json={"plate": "EF456GH", "brand": "Fiat", "model": "Uno", "supplier_id": 9}
    )
    assert unknown_supplier.status_code == 404

    search = (await client.get("/fleet/vehicles/", params={"keyword": "panda"})).json()
    assert [v["plate"] for v in search] == ["AB123CD"]


@pytest.mark.asyncio
async def test_vehicle_photo(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)

    missing = await client.get(f"/fleet/vehicles/{vehicle['id']}/photo")
    assert missing.status_code == 404

    not_image = await client.post(
        f"/fleet/vehicles/{vehicle['id']}/photo",
        files={"file": ("car.pdf", b"%PDF", "application/pdf")},
    )
    assert not_image.status_code == 400

    uploaded = await client.post(
        f"/fleet/vehicles/{vehicle['id']}/photo",
        files={"file": ("car.png", b"\x89PNG data", "image/png")},
    )
    assert uploaded.status_code == 200
    assert uploaded.json()["image_path"].startswith(f"vehicles/{vehicle['id']}/docs/")

    photo = await client.get(f"/fleet/vehicles/{vehicle['id']}/photo")
    assert photo.status_code == 200
    assert photo.content == b"\x89PNG data"


@pytest.mark.asyncio
async def test_assignment_rules(client: AsyncClient) -> None:
    first = await create_employee(client, 0)
    second = await create_employee(client, 1)
    employment = await create_employment(client, first["id"], "M1")
    other_employment = await create_employment(client, second["id"], "M2")
    vehicle = await create_vehicle(client)
    expired = await create_vehicle(client, "ZZ999ZZ", insurance_expiry=YESTERDAY.isoformat())

    created = await _assign(client, employment["id"], vehicle["id"])
    assert created.status_code == 201
    assert created.json()["status"] == "ASSIGNED"
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["status"] == "ASSIGNED"

    busy = await _assign(client, other_employment["id"], vehicle["id"])
    assert busy.status_code == 400
    errors = busy.json()["details"]["errors"]
    assert "Vehicle AB123CD is not in service" in errors
    assert "Vehicle AB123CD is already assigned" in errors

    rejected = await _assign(
        client,
        employment["id"],
        expired["id"],
        start_date=TODAY.isoformat(),
        end_date=YESTERDAY.isoformat(),
    )
    assert rejected.status_code == 400
    assert set(rejected.json()["details"]["errors"]) == {
        "Insurance of vehicle ZZ999ZZ has expired",
        "Employment M1 already has an assigned vehicle",
        "End date must not precede start date",
    }

    history = (await client.get(f"/fleet/vehicles/{vehicle['id']}/assignments")).json()
    assert [a["id"] for a in history] == [created.json()["id"]]

    deleted = await client.delete(f"/fleet/assignments/{created.json()['id']}")
    assert deleted.status_code == 204
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["status"] == "IN_SERVICE"


@pytest.mark.asyncio
async def test_assignment_switch_vehicle_frees_previous(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    employment = await create_employment(client, employee["id"])
    first = await create_vehicle(client)
    second = await create_vehicle(client, "EF456GH")
    assignment = (await _assign(client, employment["id"], first["id"])).json()

    response = await client.put(
        f"/fleet/assignments/{assignment['id']}",
        json={"employment_id": employment["id"], "vehicle_id": second["id"], "start_date": TODAY.isoformat()},
    )
    assert response.status_code == 200
    assert (await client.get(f"/fleet/vehicles/{first['id']}")).json()["status"] == "IN_SERVICE"
    assert (await client.get(f"/fleet/vehicles/{second['id']}")).json()["status"] == "ASSIGNED"


@pytest.mark.asyncio
async def test_assignment_ending_today_is_still_active(client: AsyncClient) -> None:
    first = await create_employee(client, 0)
    second = await create_employee(client, 1)
    employment = await create_employment(client, first["id"], "M1")
    other_employment = await create_employment(client, second["id"], "M2")
    vehicle = await create_vehicle(client)

    created = await _assign(client, employment["id"], vehicle["id"], end_date=TODAY.isoformat())
    assert created.status_code == 201
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["status"] == "ASSIGNED"

    again = await _assign(client, other_employment["id"], vehicle["id"])
    assert again.status_code == 400
    assert "Vehicle AB123CD is already assigned" in again.json()["details"]["errors"]

    released = await client.post("/fleet/assignments/release-expired")
    assert released.json() == {"released": 0}


@pytest.mark.asyncio
async def test_release_expired_assignments(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    employment = await create_employment(client, employee["id"], start_date="2024-01-01")
    vehicle = await create_vehicle(client)
    assignment = (await _assign(client, employment["id"], vehicle["id"], start_date="2024-01-01")).json()
    await client.put(
        f"/fleet/assignments/{assignment['id']}",
        json={
            "employment_id": employment["id"],
            "vehicle_id": vehicle["id"],
            "start_date": "2024-01-01",
            "end_date": "2024-02-01",
            "status": "ASSIGNED",
        },
    )

    released = await client.post("/fleet/assignments/release-expired")
    assert released.json() == {"released": 1}
    assert (await client.get(f"/fleet/assignments/{assignment['id']}")).json()["status"] == "RETURNED"
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["status"] == "IN_SERVICE"


@pytest.mark.asyncio
async def test_fuel_card_rules(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    vehicle = await create_vehicle(client)

    card = await client.post(
        "/fleet/fuel-cards/",
        json={"card_number": "CARD-1", "vehicle_id": vehicle["id"], "employee_id": employee["id"]},
    )
    assert card.status_code == 201
    assert card.json()["active"] is True

    duplicate = await client.post("/fleet/fuel-cards/", json={"card_number": "CARD-1"})
    assert duplicate.status_code == 409

    second_active = await client.post(
        "/fleet/fuel-cards/", json={"card_number": "CARD-2", "vehicle_id": vehicle["id"]}
    )
    assert second_active.status_code == 400
    assert second_active.json()["details"]["errors"] == ["Vehicle already has an active fuel card"]

    expired = await client.post(
        "/fleet/fuel-cards/",
        json={"card_number": "CARD-3", "vehicle_id": vehicle["id"], "expiry_date": YESTERDAY.isoformat()},
    )
    assert expired.status_code == 201
    assert expired.json()["active"] is False

    assert (await client.get("/fleet/vehicles/without-fuel-card")).json() == []
    await client.delete(f"/fleet/fuel-cards/{card.json()['id']}")
    await client.delete(f"/fleet/fuel-cards/{expired.json()['id']}")
    assert [v["id"] for v in (await client.get("/fleet/vehicles/without-fuel-card")).json()] == [vehicle["id"]]


@pytest.mark.asyncio
async def test_refuel_mileage_rules(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client, current_mileage=1000)
    url = "/fleet/refuels/"

    inherited = await client.post(url, json={"vehicle_id": vehicle["id"], "refuel_date": TODAY.isoformat(), "quantity": 40})
    assert inherited.status_code == 201
    assert inherited.json()["mileage"] == 1000

    ok = await client.post(
        url, json={"vehicle_id": vehicle["id"], "refuel_date": TODAY.isoformat(), "quantity": 35, "mileage": 1500}
    )
    assert ok.status_code == 201
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["current_mileage"] == 1500

    bad = await client.post(
        url,
        json={
            "vehicle_id": vehicle["id"],
            "refuel_date": (TODAY + timedelta(days=2)).isoformat(),
            "quantity": 250,
            "mileage": 1200,
        },
    )
    assert bad.status_code == 400
    assert bad.json()["details"]["errors"] == [
        "Mileage must be greater than the last recorded (1500 km)",
        "Quantity cannot exceed 200 litres",
        "Refuel date cannot be in the future",
    ]

    listed = (await client.get(url, params={"vehicle_id": vehicle["id"]})).json()
    assert len(listed) == 2


@pytest.mark.asyncio
async def test_maintenance_rolls_over_tasks(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)
    task_type = await client.post(
        "/settings/task-types/", json={"code": "service", "months_interval": 12, "km_interval": 15000}
    )
    assert task_type.json()["code"] == "SERVICE"
    type_id = task_type.json()["id"]
    task = await client.post(
        "/fleet/vehicle-tasks/", json={"vehicle_id": vehicle["id"], "task_type_id": type_id, "due_date": "2024-03-01"}
    )
    assert task.status_code == 201

    record = await client.post(
        "/fleet/maintenance/",
        json={
            "vehicle_id": vehicle["id"],
            "task_type_id": type_id,
            "service_date": "2024-02-20",
            "mileage": 20000,
            "cost": 300,
        },
    )
    assert record.status_code == 201
    assert (await client.get(f"/fleet/vehicles/{vehicle['id']}")).json()["current_mileage"] == 20000

    tasks = (await client.get("/fleet/vehicle-tasks/", params={"vehicle_id": vehicle["id"]})).json()
    assert [(t["status"], t["due_date"], t["due_mileage"]) for t in tasks] == [
        ("CLOSED", "2024-03-01", None),
        ("OPEN", "2025-02-20", 35000),
    ]

    await client.post(
        "/fleet/maintenance/",
        json={"vehicle_id": vehicle["id"], "service_date": "2024-07-01", "cost": 100},
    )
    stats = (await client.get("/fleet/maintenance/stats/2024")).json()
    assert stats == {"year": 2024, "count": 2, "total_cost": 400.0, "average_cost": 200.0}

    filtered = (await client.get("/fleet/maintenance/", params={"task_type_id": type_id})).json()
    assert [m["id"] for m in filtered] == [record.json()["id"]]


@pytest.mark.asyncio
async def test_new_vehicle_gets_automatic_tasks(client: AsyncClient) -> None:
    assert (await client.post("/settings/task-types/seed")).json() == {"created": 6}
    assert (await client.post("/settings/task-types/seed")).json() == {"created": 0}
    codes = {t["id"]: t["code"] for t in (await client.get("/settings/task-types/")).json()}
    ids = {code: type_id for type_id, code in codes.items()}

    vehicle = await create_vehicle(client, contract_start_date="2024-05-10", current_mileage=1200)
    url = "/fleet/vehicle-tasks/"
    params = {"vehicle_id": vehicle["id"], "open_only": True}
    tasks = (await client.get(url, params=params)).json()
    assert [(codes[t["task_type_id"]], t["due_date"], t["due_mileage"]) for t in tasks] == [
        ("TYRE_CHANGE_WINTER", "2024-11-15", None),
        ("TYRE_CHANGE_SUMMER", "2025-04-15", None),
        ("ORDINARY_SERVICE", "2025-05-10", 21200),
        ("REVISION", "2028-05-10", None),
    ]

    await client.post(
        "/fleet/maintenance/",
        json={
            "vehicle_id": vehicle["id"],
            "task_type_id": ids["ORDINARY_SERVICE"],
            "service_date": "2024-06-01",
            "mileage": 5000,
        },
    )
    services = [
        t for t in (await client.get(url, params=params)).json() if t["task_type_id"] == ids["ORDINARY_SERVICE"]
    ]
    assert [(t["due_date"], t["due_mileage"]) for t in services] == [("2025-06-01", 25000)]

    only_revision = await client.put(f"{url}auto/{vehicle['id']}", json={"task_type_ids": [ids["REVISION"]]})
    assert only_revision.status_code == 200
    assert [codes[t["task_type_id"]] for t in only_revision.json()] == ["REVISION"]

    manual_type = await client.put(f"{url}auto/{vehicle['id']}", json={"task_type_ids": [ids["EXTRA_SERVICE"]]})
    assert manual_type.status_code == 400
    assert manual_type.json()["details"]["errors"] == [f"Task type {ids['EXTRA_SERVICE']} is not automatic"]

    restored = await client.post(f"{url}ensure/{vehicle['id']}")
    assert len(restored.json()) == 4
    assert (await client.post(f"{url}ensure/999")).status_code == 404


@pytest.mark.asyncio
async def test_delete_vehicle_removes_history(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)
    await client.post(
        "/fleet/refuels/", json={"vehicle_id": vehicle["id"], "refuel_date": TODAY.isoformat(), "quantity": 10}
    )
    await client.post("/fleet/maintenance/", json={"vehicle_id": vehicle["id"], "service_date": "2024-01-10"})
    card = (await client.post("/fleet/fuel-cards/", json={"card_number": "C-7", "vehicle_id": vehicle["id"]})).json()

    response = await client.delete(f"/fleet/vehicles/{vehicle['id']}")
    assert response.status_code == 204
    assert (await client.get("/fleet/refuels/")).json() == []
    assert (await client.get("/fleet/maintenance/")).json() == []
    assert (await client.get(f"/fleet/fuel-cards/{card['id']}")).json()["vehicle_id"] is None
