"""Expense reports: totals, approval and sequential numbering."""
from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import ExpenseStatus, OwnerType
from ..schemas import ExpenseItemPayload, ExpenseReportCreate, ExpenseReportUpdate
from ..storage import FileStorage
from .common import delete_now, ensure_exists, get_or_404, like
from .documents import purge_owner_documents

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("item_date", "description", "amount", "invoice_number", "supplier_id", "project_id", "note")


def _at(values: Sequence[str] | None, index: int) -> str | None:
    if values is None or index >= len(values):
        return None
    value = values[index]
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _to_float(value: str | None) -> float:
    if value is None:
        return 0.0
    try:
        return float(value.replace(",", "."))
    except ValueError as exc:
        raise BusinessValidationError(f"Invalid amount: {value}") from exc


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise BusinessValidationError(f"Invalid identifier: {value}") from exc


def _to_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise BusinessValidationError(f"Invalid date: {value}") from exc


def build_items(
    ids: Sequence[str] | None = None,
    descriptions: Sequence[str] | None = None,
    amounts: Sequence[str] | None = None,
    dates: Sequence[str] | None = None,
    invoices: Sequence[str] | None = None,
    suppliers: Sequence[str] | None = None,
    notes: Sequence[str] | None = None,
) -> list[ExpenseItemPayload]:
    """Turn the parallel lists of an expense form into item payloads.

    Missing lists count as empty and rows without a description are skipped.
    """

    items = []
    for index in range(len(descriptions or [])):
        description = _at(descriptions, index)
        if description is None:
            continue
        items.append(
            ExpenseItemPayload(
                id=_to_int(_at(ids, index)),
                description=description,
                amount=_to_float(_at(amounts, index)),
                item_date=_to_date(_at(dates, index)),
                invoice_number=_at(invoices, index),
                supplier_id=_to_int(_at(suppliers, index)),
                note=_at(notes, index),
            )
        )
    return items


def sequential_number(number: str | None) -> int:
    """Three-digit prefix of a report number, 0 when absent."""

    if not number or len(number) < 3:
        return 0
    try:
        return int(number[:3])
    except ValueError:
        return 0


async def next_number(session: AsyncSession) -> str:
    count = await session.scalar(select(func.count()).select_from(models.ExpenseReport))
    return "%03d/%d/" % ((count or 0) + 1, date.today().year)


async def list_reports(
    session: AsyncSession,
    employee: str | None = None,
    status: ExpenseStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[models.ExpenseReport]:
    stmt = select(models.ExpenseReport).join(
        models.Employee, models.Employee.id == models.ExpenseReport.employee_id
    )
    if employee:
        full_name = func.lower(models.Employee.last_name + " " + models.Employee.first_name)
        stmt = stmt.where(full_name.like(like(employee)))
    if status is not None:
        stmt = stmt.where(models.ExpenseReport.status == status)
    if start_date is not None:
        stmt = stmt.where(models.ExpenseReport.start_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(models.ExpenseReport.end_date <= end_date)
    result = await session.execute(stmt.order_by(models.ExpenseReport.number))
    return list(result.scalars().all())


async def get_report(session: AsyncSession, report_id: int) -> models.ExpenseReport:
    return await get_or_404(session, models.ExpenseReport, report_id, "Expense report")


async def _check(session: AsyncSession, payload: ExpenseReportCreate) -> list[str]:
    await get_or_404(session, models.Employee, payload.employee_id, "Employee")
    await ensure_exists(session, models.Project, payload.project_id, "Project")
    for item in payload.items:
        await ensure_exists(session, models.Supplier, item.supplier_id, "Supplier")
        await ensure_exists(session, models.Project, item.project_id, "Project")

    errors = []
    if not payload.items:
        errors.append("Add at least one expense item")
    if payload.creation_date is not None and payload.creation_date > date.today():
        errors.append("Creation date cannot be in the future")
    if payload.start_date and payload.end_date and payload.end_date < payload.start_date:
        errors.append("End date must not precede start date")
    return errors


def _apply_totals(report: models.ExpenseReport, reimbursable: float | None) -> None:
    report.total = round(sum(item.amount or 0.0 for item in report.items), 2)
    report.reimbursable = reimbursable or 0.0
    report.non_reimbursable = round(report.total - report.reimbursable, 2)


def _scalars(payload: ExpenseReportCreate) -> dict:
    return payload.model_dump(exclude={"items", "reimbursable", "status", "number"})


async def create_report(session: AsyncSession, payload: ExpenseReportCreate) -> models.ExpenseReport:
    """Create a DRAFT report whose total is the sum of its items."""

    errors = await _check(session, payload)
    if errors:
        logger.warning("Expense report rejected: %s", "; ".join(errors))
        raise BusinessValidationError("Invalid expense report", errors)

    values = _scalars(payload)
    values["creation_date"] = payload.creation_date or date.today()
    report = models.ExpenseReport(**values)
    report.number = payload.number or await next_number(session)
    report.status = ExpenseStatus.DRAFT
    report.items = [
        models.ExpenseItem(**item.model_dump(include=set(ITEM_FIELDS))) for item in payload.items
    ]
    _apply_totals(report, payload.reimbursable)
    session.add(report)
    await session.commit()
    logger.info("Created expense report %s (%s)", report.id, report.number)
    return report


async def update_report(
    session: AsyncSession, storage: FileStorage, report_id: int, payload: ExpenseReportUpdate
) -> models.ExpenseReport:
    """Replace scalars, merge items by id and drop the items no longer sent."""

    report = await get_report(session, report_id)
    errors = await _check(session, payload)
    if errors:
        logger.warning("Expense report %s update rejected: %s", report_id, "; ".join(errors))
        raise BusinessValidationError("Invalid expense report", errors)

    values = _scalars(payload)
    values["creation_date"] = payload.creation_date or report.creation_date
    for key, value in values.items():
        setattr(report, key, value)
    if payload.number:
        report.number = payload.number
    if payload.status is not None:
        report.status = payload.status

    current = {item.id: item for item in report.items}
    merged = []
    for item in payload.items:
        values = item.model_dump(include=set(ITEM_FIELDS))
        existing = current.pop(item.id, None) if item.id is not None else None
        if existing is None:
            merged.append(models.ExpenseItem(**values))
        else:
            for key, value in values.items():
                setattr(existing, key, value)
            merged.append(existing)
    for removed in current.values():
        await purge_owner_documents(session, storage, OwnerType.EXPENSE_ITEM, removed)
    report.items = merged
    _apply_totals(report, payload.reimbursable)
    await session.commit()
    return report


async def renumber_after(session: AsyncSession, removed_number: int) -> None:
    """Shift the sequential prefix of later reports down by one."""

    if removed_number <= 0:
        return
    result = await session.execute(select(models.ExpenseReport))
    for report in result.scalars().all():
        current = sequential_number(report.number)
        if current > removed_number:
            report.number = "%03d%s" % (current - 1, report.number[3:])


async def remove_report(session: AsyncSession, storage: FileStorage, report: models.ExpenseReport) -> None:
    """Delete a report, its items and their documents; the caller commits."""

    removed_number = sequential_number(report.number)
    for item in report.items:
        await purge_owner_documents(session, storage, OwnerType.EXPENSE_ITEM, item)
    await delete_now(session, report)
    await renumber_after(session, removed_number)


async def delete_report(session: AsyncSession, storage: FileStorage, report_id: int) -> None:
    report = await get_report(session, report_id)
    await remove_report(session, storage, report)
    await session.commit()
    logger.info("Deleted expense report %s", report_id)


async def toggle_approval(session: AsyncSession, report_id: int) -> models.ExpenseReport:
    report = await get_report(session, report_id)
    if report.status == ExpenseStatus.APPROVED:
        report.status = ExpenseStatus.DRAFT
        report.approval_date = None
    else:
        report.status = ExpenseStatus.APPROVED
        report.approval_date = date.today()
    await session.commit()
    logger.info("Expense report %s is now %s", report_id, report.status.value)
    return report
