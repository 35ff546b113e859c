"""Integration tests for vehicle bookings."""
from datetime import date, datetime, time, timedelta

import pytest
from httpx import AsyncClient

from conftest import create_employee, create_employment, create_vehicle

URL = "/fleet/vehicle-bookings/"


async def _book(client: AsyncClient, vehicle_id: int, start: str, end: str, **extra):
    return await client.post(URL, json={"vehicle_id": vehicle_id, "start_at": start, "end_at": end, **extra})


@pytest.mark.asyncio
async def test_booking_overlaps_are_rejected(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)

    first = await _book(client, vehicle["id"], "2030-01-01T09:00:00", "2030-01-01T12:00:00", title="Site visit")
    assert first.status_code == 201
    assert first.json()["status"] == "PLANNED"

    clash = await _book(client, vehicle["id"], "2030-01-01T11:00:00", "2030-01-01T13:00:00")
    assert clash.status_code == 400
    assert clash.json()["details"]["errors"] == [
        "Conflicts with another booking from 01/01/2030 09:00 to 01/01/2030 12:00"
    ]

    back_to_back = await _book(client, vehicle["id"], "2030-01-01T12:00:00", "2030-01-01T14:00:00")
    assert back_to_back.status_code == 201

    reversed_window = await _book(client, vehicle["id"], "2030-01-02T10:00:00", "2030-01-02T09:00:00")
    assert reversed_window.status_code == 400
    assert reversed_window.json()["details"]["errors"] == ["End must be after start"]

    cancelled = await client.put(
        f"{URL}{first.json()['id']}",
        json={"start_at": "2030-01-01T09:00:00", "end_at": "2030-01-01T12:00:00", "status": "CANCELLED"},
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["title"] is None
    retry = await _book(client, vehicle["id"], "2030-01-01T10:00:00", "2030-01-01T11:00:00")
    assert retry.status_code == 201

    unknown = await _book(client, 999, "2030-01-01T10:00:00", "2030-01-01T11:00:00")
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_assigned_vehicle_cannot_be_booked(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    employment = await create_employment(client, employee["id"])
    vehicle = await create_vehicle(client)
    today = date.today()
    await client.post(
        "/fleet/assignments/",
        json={"employment_id": employment["id"], "vehicle_id": vehicle["id"], "start_date": today.isoformat()},
    )

    response = await _book(client, vehicle["id"], "2030-01-01T09:00:00", "2030-01-01T12:00:00")
    assert response.status_code == 400
    assert response.json()["details"]["errors"] == [
        "Vehicle AB123CD is not available for booking (status: Assigned)",
        f"Vehicle is assigned from {today:%d/%m/%Y} 00:00 to 31/12/9999 23:59",
    ]


@pytest.mark.asyncio
async def test_list_range_stats_and_delete(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)
    now = datetime.now().replace(microsecond=0)
    today = date.today()
    spanning = await _book(
        client,
        vehicle["id"],
        datetime.combine(today, time.min).isoformat(),
        datetime.combine(today + timedelta(days=1), time(23, 59)).isoformat(),
    )
    soon = await _book(
        client, vehicle["id"], (now + timedelta(days=2)).isoformat(), (now + timedelta(days=3)).isoformat()
    )
    await _book(client, vehicle["id"], "2020-01-01T09:00:00", "2020-01-01T10:00:00")
    await _book(
        client,
        vehicle["id"],
        (now + timedelta(days=4)).isoformat(),
        (now + timedelta(days=5)).isoformat(),
        status="CANCELLED",
    )

    everything = (await client.get(URL, params={"vehicle_id": vehicle["id"]})).json()
    assert len(everything) == 4
    assert everything[0]["start_at"] == "2020-01-01T09:00:00"

    ranged = (
        await client.get(
            URL,
            params={
                "vehicle_id": vehicle["id"],
                "from": (today + timedelta(days=1)).isoformat(),
                "to": (today + timedelta(days=2)).isoformat(),
            },
        )
    ).json()
    assert [b["id"] for b in ranged] == [spanning.json()["id"], soon.json()["id"]]

    stats = (await client.get(f"{URL}stats", params={"days": 7})).json()
    assert stats == {"active": 2, "today": 1, "upcoming": 1}
    assert (await client.get("/dashboard/")).json()["metrics"]["active_bookings"] == 2

    deleted = await client.delete(f"{URL}{soon.json()['id']}")
    assert deleted.status_code == 204
    assert (await client.get(f"{URL}{soon.json()['id']}")).status_code == 404

    await client.delete(f"/fleet/vehicles/{vehicle['id']}")
    assert (await client.get(f"{URL}{spanning.json()['id']}")).status_code == 404
