"""Integration tests for payslip upload and retrieval."""
import pytest
from httpx import AsyncClient

from conftest import create_employee

PDF = b"%PDF-1.4 payslip"


def _pdf(name: str, data: bytes = PDF) -> tuple:
    return ("files", (name, data, "application/pdf"))


@pytest.mark.asyncio
async def test_upload_matches_fiscal_codes(client: AsyncClient, storage) -> None:
    mario = await create_employee(client, 0)
    luigi = await create_employee(client, 1)

    response = await client.post(
        "/hr/payslips/upload",
        data={"month": "2024-03"},
        files=[
            _pdf("vrdlgu80a01h501q.pdf"),
            _pdf("RSSMRA85T10A562S.pdf"),
            _pdf("XXXYYY00A00Z000Z.pdf"),
            _pdf("empty.pdf", b""),
        ],
    )
    assert response.status_code == 200
    result = response.json()
    assert result["processed"] == 4
    assert result["stored"] == 3
    assert result["unmatched"] == ["XXXYYY00A00Z000Z.pdf"]
    assert result["errors"] == ["empty.pdf: File is empty"]

    listed = (await client.get("/hr/payslips/", params={"month": "2024-03"})).json()
    assert [(p["employee_id"], p["status"]) for p in listed] == [
        (mario["id"], "PENDING"),
        (luigi["id"], "PENDING"),
        (None, "UNMATCHED"),
    ]
    assert listed[0]["employee_name"] == "Rossi Mario"
    assert (storage.root / "payslips" / "2024" / "03").is_dir()

    download = await client.get(f"/hr/payslips/{listed[0]['id']}/download")
    assert download.status_code == 200
    assert download.content == PDF


@pytest.mark.asyncio
async def test_months_and_invalid_month(client: AsyncClient) -> None:
    await client.post("/hr/payslips/upload", data={"month": "2024-01"}, files=[_pdf("RSSMRA85T10A562S.pdf")])
    await client.post("/hr/payslips/upload", data={"month": "2024-02"}, files=[_pdf("RSSMRA85T10A562S.pdf")])

    assert (await client.get("/hr/payslips/months")).json() == ["2024-02", "2024-01"]

    invalid = await client.post("/hr/payslips/upload", data={"month": "2024-13"}, files=[_pdf("a.pdf")])
    assert invalid.status_code == 400
    assert (await client.get("/hr/payslips/", params={"month": "March"})).status_code == 400


@pytest.mark.asyncio
async def test_delete_payslips(client: AsyncClient, storage) -> None:
    await client.post(
        "/hr/payslips/upload",
        data={"month": "2024-05"},
        files=[_pdf("RSSMRA85T10A562S.pdf"), _pdf("VRDLGU80A01H501Q.pdf"), _pdf("BNCGPP75M20F205E.pdf")],
    )
    ids = [p["id"] for p in (await client.get("/hr/payslips/", params={"month": "2024-05"})).json()]

    bulk = await client.post("/hr/payslips/bulk-delete", json={"ids": ids[:2] + [999]})
    assert bulk.json() == {"deleted": 2}

    single = await client.delete(f"/hr/payslips/{ids[2]}")
    assert single.status_code == 204
    assert (await client.delete(f"/hr/payslips/{ids[2]}")).status_code == 404

    assert (await client.get("/hr/payslips/", params={"month": "2024-05"})).json() == []
    assert list((storage.root / "payslips" / "2024" / "05").iterdir()) == []
