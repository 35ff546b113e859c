"""Integration tests for expense reports."""
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from conftest import create_employee

YEAR = date.today().year


async def _report(client: AsyncClient, employee_id: int, *amounts: float, **overrides) -> dict:
    payload = {
        "employee_id": employee_id,
        "items": [{"description": f"Item {i}", "amount": amount} for i, amount in enumerate(amounts)],
    }
    payload.update(overrides)
    response = await client.post("/fleet/expense-reports/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_report_totals_and_numbering(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)

    assert (await client.get("/fleet/expense-reports/next-number")).json() == {"number": f"001/{YEAR}/"}

    report = await _report(client, employee["id"], 100.0, 23.5, reimbursable=80)
    assert report["number"] == f"001/{YEAR}/"
    assert report["status"] == "DRAFT"
    assert report["creation_date"] == date.today().isoformat()
    assert (report["total"], report["reimbursable"], report["non_reimbursable"]) == (123.5, 80.0, 43.5)

    plain = await _report(client, employee["id"], 10.0)
    assert plain["number"] == f"002/{YEAR}/"
    assert plain["reimbursable"] == 0.0
    assert plain["non_reimbursable"] == 10.0


@pytest.mark.asyncio
async def test_report_validation(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)

    response = await client.post(
        "/fleet/expense-reports/",
        json={
            "employee_id": employee["id"],
            "creation_date": (date.today() + timedelta(days=3)).isoformat(),
            "start_date": "2024-03-10",
            "end_date": "2024-03-01",
        },
    )
    assert response.status_code == 400
    assert response.json()["details"]["errors"] == [
        "Add at least one expense item",
        "Creation date cannot be in the future",
        "End date must not precede start date",
    ]

    unknown = await client.post(
        "/fleet/expense-reports/", json={"employee_id": 99, "items": [{"description": "Taxi", "amount": 5}]}
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_delete_renumbers_later_reports(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    first = await _report(client, employee["id"], 1.0)
    second = await _report(client, employee["id"], 2.0)
    third = await _report(client, employee["id"], 3.0)

    response = await client.delete(f"/fleet/expense-reports/{first['id']}")
    assert response.status_code == 204

    numbers = {r["id"]: r["number"] for r in (await client.get("/fleet/expense-reports/")).json()}
    assert numbers == {second["id"]: f"001/{YEAR}/", third["id"]: f"002/{YEAR}/"}


@pytest.mark.asyncio
async def test_toggle_approval(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    report = await _report(client, employee["id"], 50.0)
    url = f"/fleet/expense-reports/{report['id']}/toggle-approval"

    approved = (await client.post(url)).json()
    assert approved["status"] == "APPROVED"
    assert approved["approval_date"] == date.today().isoformat()

    draft = (await client.post(url)).json()
    assert draft["status"] == "DRAFT"
    assert draft["approval_date"] is None


@pytest.mark.asyncio
async def test_update_merges_items(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    report = await _report(client, employee["id"], 10.0, 20.0)
    kept, dropped = report["items"]

    response = await client.put(
        f"/fleet/expense-reports/{report['id']}",
        json={
            "employee_id": employee["id"],
            "purpose": "Customer visit",
            "items": [
                {"id": kept["id"], "description": "Hotel", "amount": 90.0},
                {"description": "Dinner", "amount": 30.0},
            ],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["number"] == report["number"]
    assert body["purpose"] == "Customer visit"
    assert body["total"] == 120.0
    assert [i["description"] for i in body["items"]] == ["Hotel", "Dinner"]
    assert body["items"][0]["id"] == kept["id"]
    assert dropped["id"] not in {i["id"] for i in body["items"]}


@pytest.mark.asyncio
async def test_update_keeps_creation_date_when_omitted(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    report = await _report(client, employee["id"], 10.0, creation_date="2024-05-02")

    response = await client.put(
        f"/fleet/expense-reports/{report['id']}",
        json={"employee_id": employee["id"], "purpose": "Renamed", "items": []},
    )
    assert response.status_code == 200, response.text
    assert response.json()["creation_date"] == "2024-05-02"
    assert response.json()["total"] == 0.0

    fetched = (await client.get(f"/fleet/expense-reports/{report['id']}")).json()
    assert fetched["creation_date"] == "2024-05-02"


@pytest.mark.asyncio
async def test_form_submission_creates_then_updates(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)

    created = await client.post(
        "/fleet/expense-reports/form",
        data={
            "employee_id": str(employee["id"]),
            "purpose": "Trip",
            "payment_method": "BANK_TRANSFER",
            "item_description": ["Train", "Hotel"],
            "item_amount": ["35,50", "120"],
            "item_date": ["2024-03-01", ""],
        },
    )
    assert created.status_code == 200, created.text
    report = created.json()
    assert report["total"] == 155.5
    assert report["payment_method"] == "BANK_TRANSFER"

    updated = await client.post(
        "/fleet/expense-reports/form",
        data={
            "employee_id": str(employee["id"]),
            "report_id": str(report["id"]),
            "item_id": [str(report["items"][0]["id"])],
            "item_description": ["Train"],
            "item_amount": ["40"],
        },
    )
    assert updated.status_code == 200
    assert updated.json()["total"] == 40.0
    assert len(updated.json()["items"]) == 1

    bad = await client.post(
        "/fleet/expense-reports/form",
        data={"employee_id": str(employee["id"]), "item_description": ["Taxi"], "item_amount": ["ten"]},
    )
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_report_filters(client: AsyncClient) -> None:
    mario = await create_employee(client, 0)
    luigi = await create_employee(client, 1)
    await _report(client, mario["id"], 1.0, start_date="2024-01-05", end_date="2024-01-10")
    late = await _report(client, luigi["id"], 2.0, start_date="2024-03-01", end_date="2024-03-02")
    await client.post(f"/fleet/expense-reports/{late['id']}/toggle-approval")

    by_name = (await client.get("/fleet/expense-reports/", params={"employee": "verdi lu"})).json()
    assert [r["id"] for r in by_name] == [late["id"]]

    by_status = (await client.get("/fleet/expense-reports/", params={"status": "APPROVED"})).json()
    assert [r["id"] for r in by_status] == [late["id"]]

    by_period = (
        await client.get("/fleet/expense-reports/", params={"start_date": "2024-01-01", "end_date": "2024-01-31"})
    ).json()
    assert [r["employee_id"] for r in by_period] == [mario["id"]]
