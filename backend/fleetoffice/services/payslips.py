"""Payslip upload, matching by fiscal code, and retrieval."""
from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import AppError, BusinessValidationError
from ..models.enums import PayslipStatus
from ..storage import FileStorage, base_name
from .common import get_or_404

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def fiscal_code_from_filename(filename: str | None) -> str:
    """Upper-case alphanumerics of the file stem, at most 16 characters."""

    stem = PurePosixPath(base_name(filename)).stem
    return re.sub(r"[^A-Za-z0-9]", "", stem).upper()[:16]


def month_directory(reference_month: str) -> str:
    match = MONTH_PATTERN.match(reference_month or "")
    if match is None:
        raise BusinessValidationError(f"Invalid reference month: {reference_month} (expected YYYY-MM)")
    return f"payslips/{match.group(1)}/{match.group(2)}"


async def upload_payslips(
    session: AsyncSession,
    storage: FileStorage,
    reference_month: str,
    files: list[tuple[str | None, str | None, bytes]],
) -> dict:
    """Store each file and link it to the employee whose fiscal code names it."""

    directory = month_directory(reference_month)
    result = {"processed": 0, "stored": 0, "unmatched": [], "errors": []}
    for filename, content_type, data in files:
        result["processed"] += 1
        fiscal_code = fiscal_code_from_filename(filename)
        if not fiscal_code:
            result["errors"].append(f"{filename}: no fiscal code in filename")
            continue
        try:
            path = storage.store(directory, filename, data, content_type)
        except AppError as exc:
            logger.warning("Payslip %s rejected: %s", filename, exc.message)
            result["errors"].append(f"{filename}: {exc.message}")
            continue

        employee = await session.scalar(
            select(models.Employee).where(func.upper(models.Employee.fiscal_code) == fiscal_code)
        )
        if employee is None:
            result["unmatched"].append(base_name(filename))
        session.add(
            models.Payslip(
                employee_id=employee.id if employee else None,
                fiscal_code=fiscal_code,
                reference_month=reference_month,
                storage_path=path,
                original_filename=base_name(filename),
                status=PayslipStatus.PENDING if employee else PayslipStatus.UNMATCHED,
            )
        )
        result["stored"] += 1
    await session.commit()
    logger.info(
        "Payslips for %s: %s processed, %s stored, %s unmatched",
        reference_month,
        result["processed"],
        result["stored"],
        len(result["unmatched"]),
    )
    return result


def _display_name(employee: models.Employee | None) -> str | None:
    if employee is None:
        return None
    return f"{employee.last_name} {employee.first_name}"


async def list_payslips(session: AsyncSession, reference_month: str) -> list[dict]:
    """Payslips of a month sorted by employee name, unmatched ones by fiscal code."""

    month_directory(reference_month)
    result = await session.execute(
        select(models.Payslip, models.Employee)
        .outerjoin(models.Employee, models.Employee.id == models.Payslip.employee_id)
        .where(models.Payslip.reference_month == reference_month)
    )
    rows = []
    for payslip, employee in result.all():
        rows.append(
            {
                "id": payslip.id,
                "employee_id": payslip.employee_id,
                "employee_name": _display_name(employee),
                "fiscal_code": payslip.fiscal_code,
                "reference_month": payslip.reference_month,
                "original_filename": payslip.original_filename,
                "uploaded_at": payslip.uploaded_at,
                "status": payslip.status,
            }
        )
    rows.sort(key=lambda row: (row["employee_name"] or row["fiscal_code"]).lower())
    return rows


async def available_months(session: AsyncSession) -> list[str]:
    result = await session.execute(
        select(models.Payslip.reference_month).distinct().order_by(models.Payslip.reference_month.desc())
    )
    return list(result.scalars().all())


async def payslip_file(session: AsyncSession, storage: FileStorage, payslip_id: int) -> tuple[models.Payslip, Path]:
    payslip = await get_or_404(session, models.Payslip, payslip_id, "Payslip")
    return payslip, storage.resolve(payslip.storage_path)


async def delete_payslips(session: AsyncSession, storage: FileStorage, payslip_ids: list[int]) -> int:
    """Delete the given payslips and their files; unknown ids are skipped."""

    result = await session.execute(select(models.Payslip).where(models.Payslip.id.in_(payslip_ids)))
    payslips = list(result.scalars().all())
    for payslip in payslips:
        await session.delete(payslip)
    await session.commit()
    for payslip in payslips:
        storage.delete(payslip.storage_path)
    logger.info("Deleted %s payslips", len(payslips))
    return len(payslips)


async def delete_payslip(session: AsyncSession, storage: FileStorage, payslip_id: int) -> None:
    await get_or_404(session, models.Payslip, payslip_id, "Payslip")
    await delete_payslips(session, storage, [payslip_id])
