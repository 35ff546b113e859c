"""Expense report endpoints."""
from datetime import date
from typing import List, Sequence

from fastapi import APIRouter, Depends, Form, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import ExpenseReport
from ..models.enums import ExpenseStatus, PaymentMethod
from ..schemas import ExpenseReportCreate, ExpenseReportRead, ExpenseReportUpdate, NextNumber
from ..services import expenses as service
from ..storage import FileStorage

router = APIRouter(prefix="/fleet/expense-reports", tags=["expenses"])


@router.get("/", response_model=list[ExpenseReportRead])
async def list_reports(
    employee: str | None = None,
    status: ExpenseStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[ExpenseReport]:
    """Filter reports by employee name, status and period."""

    return await service.list_reports(session, employee, status, start_date, end_date)


@router.get("/next-number", response_model=NextNumber)
async def next_number(session: AsyncSession = Depends(get_db_session)) -> NextNumber:
    return NextNumber(number=await service.next_number(session))


@router.get("/{report_id}", response_model=ExpenseReportRead)
async def get_report(report_id: int, session: AsyncSession = Depends(get_db_session)) -> ExpenseReport:
    return await service.get_report(session, report_id)


@router.post("/", response_model=ExpenseReportRead, status_code=status.HTTP_201_CREATED)
async def create_report(payload: ExpenseReportCreate, session: AsyncSession = Depends(get_db_session)) -> ExpenseReport:
    return await service.create_report(session, payload)


@router.post("/form", response_model=ExpenseReportRead)
async def submit_form(
    employee_id: int = Form(...),
    report_id: int | None = Form(None),
    number: str | None = Form(None),
    purpose: str | None = Form(None),
    creation_date: date | None = Form(None),
    start_date: date | None = Form(None),
    end_date: date | None = Form(None),
    reimbursable: float | None = Form(None),
    payment_method: PaymentMethod | None = Form(None),
    notes: str | None = Form(None),
    item_id: List[str] = Form(None),
    item_description: List[str] = Form(None),
    item_amount: List[str] = Form(None),
    item_date: List[str] = Form(None),
    item_invoice: List[str] = Form(None),
    item_supplier: List[str] = Form(None),
    item_note: List[str] = Form(None),
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> ExpenseReport:
    """Create or update a report from a form with parallel item lists."""

    values = {
        "employee_id": employee_id,
        "number": number,
        "purpose": purpose,
        "creation_date": creation_date,
        "start_date": start_date,
        "end_date": end_date,
        "reimbursable": reimbursable,
        "payment_method": payment_method,
        "notes": notes,
        "items": service.build_items(
            item_id, item_description, item_amount, item_date, item_invoice, item_supplier, item_note
        ),
    }
    if report_id is None:
        return await service.create_report(session, ExpenseReportCreate(**values))
    return await service.update_report(session, storage, report_id, ExpenseReportUpdate(**values))


@router.put("/{report_id}", response_model=ExpenseReportRead)
async def update_report(
    report_id: int,
    payload: ExpenseReportUpdate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> ExpenseReport:
    """Replace a report's fields and merge its items by id."""

    return await service.update_report(session, storage, report_id, payload)


@router.post("/{report_id}/toggle-approval", response_model=ExpenseReportRead)
async def toggle_approval(report_id: int, session: AsyncSession = Depends(get_db_session)) -> ExpenseReport:
    return await service.toggle_approval(session, report_id)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    """Delete a report and renumber the ones after it."""

    await service.delete_report(session, storage, report_id)
