"""Integration tests for document attachments."""
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from conftest import create_employee, create_vehicle

PDF = b"%PDF-1.4 document"
TODAY = date.today()


async def _upload(client: AsyncClient, owner: str, owner_id: int, name: str = "licence.pdf", **form) -> dict:
    data = {"document_type": "DRIVING_LICENSE"}
    data.update(form)
    response = await client.post(
        f"/documents/{owner}/{owner_id}",
        data=data,
        files={"file": (name, PDF, "application/pdf")},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_upload_list_and_download(client: AsyncClient, storage) -> None:
    employee = await create_employee(client, 0)
    document = await _upload(client, "employee", employee["id"], "scans/licence.pdf")

    assert document["original_filename"] == "licence.pdf"
    assert document["size"] == len(PDF)
    assert document["filename"].endswith("_licence.pdf")
    assert (storage.root / "employees" / str(employee["id"]) / "docs" / document["filename"]).is_file()

    listed = (await client.get(f"/documents/employee/{employee['id']}")).json()
    assert [d["id"] for d in listed] == [document["id"]]

    download = await client.get(f"/documents/{document['id']}/download")
    assert download.status_code == 200
    assert download.content == PDF
    assert "licence.pdf" in download.headers["content-disposition"]

    by_name = await client.get(f"/documents/employee/{employee['id']}/files/{document['filename']}")
    assert by_name.status_code == 200
    assert by_name.content == PDF

    missing = await client.get(f"/documents/employee/{employee['id']}/files/other.pdf")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_download_guesses_content_type_from_name(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)
    response = await client.post(
        f"/documents/vehicle/{vehicle['id']}",
        data={"document_type": "OTHER"},
        files={"file": ("front.png", b"\x89PNG data", "image/jpeg")},
    )
    assert response.status_code == 201, response.text

    download = await client.get(f"/documents/{response.json()['id']}/download")
    assert download.status_code == 200
    assert download.headers["content-type"] == "image/png"


@pytest.mark.asyncio
async def test_upload_rejections(client: AsyncClient) -> None:
    vehicle = await create_vehicle(client)

    unknown_owner = await client.post(
        "/documents/vehicle/999",
        data={"document_type": "INVOICE"},
        files={"file": ("a.pdf", PDF, "application/pdf")},
    )
    assert unknown_owner.status_code == 404

    bad_type = await client.post(
        f"/documents/vehicle/{vehicle['id']}",
        data={"document_type": "INVOICE"},
        files={"file": ("a.exe", PDF, "application/octet-stream")},
    )
    assert bad_type.status_code == 400
    assert bad_type.json()["error"] == "FileValidationError"

    wrong_dates = await client.post(
        f"/documents/vehicle/{vehicle['id']}",
        data={"document_type": "INVOICE", "issue_date": "2024-05-01", "expiry_date": "2024-04-01"},
        files={"file": ("a.pdf", PDF, "application/pdf")},
    )
    assert wrong_dates.status_code == 400

    unknown_kind = await client.get("/documents/spaceship/1")
    assert unknown_kind.status_code == 422


@pytest.mark.asyncio
async def test_delete_document(client: AsyncClient, storage) -> None:
    vehicle = await create_vehicle(client)
    document = await _upload(client, "vehicle", vehicle["id"], document_type="REGISTRATION_CERTIFICATE")
    path = storage.root / "vehicles" / str(vehicle["id"]) / "docs" / document["filename"]
    assert path.is_file()

    response = await client.delete(f"/documents/{document['id']}")
    assert response.status_code == 204
    assert not path.exists()
    assert (await client.get(f"/documents/{document['id']}/download")).status_code == 404


@pytest.mark.asyncio
async def test_expiry_views_and_statistics(client: AsyncClient) -> None:
    employee = await create_employee(client, 0)
    owner_id = employee["id"]
    expired = await _upload(client, "employee", owner_id, "a.pdf", expiry_date=(TODAY - timedelta(days=1)).isoformat())
    soon = await _upload(client, "employee", owner_id, "b.pdf", expiry_date=(TODAY + timedelta(days=5)).isoformat())
    await _upload(client, "employee", owner_id, "c.pdf", expiry_date=(TODAY + timedelta(days=365)).isoformat())
    await _upload(client, "employee", owner_id, "d.pdf")

    stats = (await client.get("/documents/statistics")).json()
    assert (stats["total"], stats["expired"], stats["expiring_soon"], stats["valid"], stats["no_expiry"]) == (
        4,
        1,
        1,
        1,
        1,
    )
    assert stats["urgent"] == 2
    assert stats["expired_percentage"] == 25.0

    expiring = (await client.get("/documents/expiring", params={"days": 30})).json()
    assert [d["id"] for d in expiring] == [soon["id"]]

    assert [d["id"] for d in (await client.get("/documents/expired")).json()] == [expired["id"]]
