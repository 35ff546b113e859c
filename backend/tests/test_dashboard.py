"""Integration tests for the home dashboard."""
from datetime import date

import pytest
from httpx import AsyncClient

from conftest import create_employee, create_employment, create_vehicle

TODAY = date.today()
CURRENT_MONTH = f"{TODAY.year:04d}-{TODAY.month:02d}"


@pytest.mark.asyncio
async def test_empty_dashboard(client: AsyncClient) -> None:
    response = await client.get("/dashboard/", params={"months": 3})
    assert response.status_code == 200
    body = response.json()

    assert body["metrics"]["vehicles"] == 0
    assert body["metrics"]["last_incoming_protocol"] == "--"
    assert [b["amount"] for b in body["fuel_costs"]] == [0.0, 0.0, 0.0]
    assert body["fuel_costs"][-1]["month"] == CURRENT_MONTH
    assert len(body["expense_balances"]) == 3
    assert body["vehicle_status"]["IN_SERVICE"] == 0
    assert body["document_statistics"]["total"] == 0

    assert (await client.get("/dashboard/", params={"months": 0})).status_code == 422


@pytest.mark.asyncio
async def test_dashboard_figures(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    employment = await create_employment(client, employee["id"])
    assigned = await create_vehicle(client)
    await create_vehicle(client, "EF456GH")
    await client.post(
        "/fleet/assignments/",
        json={"employment_id": employment["id"], "vehicle_id": assigned["id"], "start_date": TODAY.isoformat()},
    )
    await client.post(
        "/fleet/refuels/",
        json={"vehicle_id": assigned["id"], "refuel_date": TODAY.isoformat(), "quantity": 30, "amount": 55.5},
    )
    await client.post(
        "/fleet/expense-reports/",
        json={"employee_id": employee["id"], "reimbursable": 20, "items": [{"description": "Taxi", "amount": 30}]},
    )
    await client.post("/settings/correspondence/", json={"direction": "E", "sender": "Town hall"})
    await client.post("/settings/projects/", json={"code": "P-1", "name": "Bridge", "status": "ACTIVE", "value": 5000})
    task_type = (await client.post("/settings/task-types/", json={"code": "REVISION"})).json()
    await client.post(
        "/fleet/vehicle-tasks/",
        json={"vehicle_id": assigned["id"], "task_type_id": task_type["id"], "due_date": "2030-01-01"},
    )

    body = (await client.get("/dashboard/")).json()
    metrics = body["metrics"]
    assert (metrics["vehicles"], metrics["vehicles_in_service"], metrics["assigned_vehicles"]) == (2, 1, 1)
    assert metrics["assignments"] == 1
    assert metrics["monthly_fuel_amount"] == 55.5
    assert metrics["last_incoming_protocol"] == f"001/{TODAY.year}"
    assert metrics["last_outgoing_protocol"] == "--"
    assert (metrics["active_projects"], metrics["active_projects_value"]) == (1, 5000.0)

    assert len(body["fuel_costs"]) == 6
    assert body["fuel_costs"][-1] == {"month": CURRENT_MONTH, "amount": 55.5}
    assert body["expense_balances"][-1] == {
        "month": CURRENT_MONTH,
        "total": 30.0,
        "reimbursable": 20.0,
        "non_reimbursable": 10.0,
    }
    assert body["vehicle_status"]["ASSIGNED"] == 1
    assert [(t["plate"], t["task_type"]) for t in body["upcoming_tasks"]] == [("AB123CD", "REVISION")]
    assert body["pending_expense_reports"] == []
