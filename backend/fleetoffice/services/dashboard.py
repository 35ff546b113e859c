"""Aggregates shown on the home dashboard."""
from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..models.enums import (
    AssignmentStatus,
    CorrespondenceType,
    ExpenseStatus,
    ProjectStatus,
    SupplierContractStatus,
    TaskStatus,
    VehicleStatus,
)
from ..schemas import (
    ComplianceItemRead,
    Dashboard,
    DashboardMetrics,
    ExpenseBalance,
    ExpenseReportRead,
    InsuranceRead,
    MonthlyAmount,
    UpcomingTask,
)
from . import bookings, compliance, contracts, correspondence, documents


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def month_buckets(months: int, today: date | None = None) -> list[str]:
    """The last ``months`` months as ``YYYY-MM``, oldest first, ending with the current one."""

    today = today or date.today()
    year, month = today.year, today.month
    keys = []
    for _ in range(max(months, 1)):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def first_day(bucket: str) -> date:
    year, month = bucket.split("-")
    return date(int(year), int(month), 1)


async def _count(session: AsyncSession, stmt) -> int:
    return await session.scalar(stmt) or 0


async def metrics(session: AsyncSession) -> DashboardMetrics:
    today = date.today()
    active_assignment = (models.Assignment.status == AssignmentStatus.ASSIGNED) & (
        (models.Assignment.end_date.is_(None)) | (models.Assignment.end_date >= today)
    )
    month_start = today.replace(day=1)
    fuel_amount = await session.scalar(
        select(func.coalesce(func.sum(models.Refuel.amount), 0.0)).where(models.Refuel.refuel_date >= month_start)
    )
    active_projects = (
        await session.execute(
            select(func.count(), func.coalesce(func.sum(models.Project.value), 0.0)).where(
                models.Project.status == ProjectStatus.ACTIVE
            )
        )
    ).one()
    return DashboardMetrics(
        vehicles=await _count(session, select(func.count()).select_from(models.Vehicle)),
        vehicles_in_service=await _count(
            session, select(func.count()).where(models.Vehicle.status == VehicleStatus.IN_SERVICE)
        ),
        assigned_vehicles=await _count(
            session, select(func.count(func.distinct(models.Assignment.vehicle_id))).where(active_assignment)
        ),
        assignments=await _count(session, select(func.count()).select_from(models.Assignment)),
        last_incoming_protocol=await correspondence.last_protocol(session, CorrespondenceType.E),
        last_outgoing_protocol=await correspondence.last_protocol(session, CorrespondenceType.U),
        monthly_fuel_amount=float(fuel_amount or 0.0),
        active_projects=active_projects[0],
        active_projects_value=float(active_projects[1] or 0.0),
        active_contracts=await _count(
            session, select(func.count()).where(models.Contract.status == SupplierContractStatus.ACTIVE)
        ),
        active_bookings=await bookings.count_active(session),
    )


async def vehicle_status_counts(session: AsyncSession) -> dict[str, int]:
    counts = dict(
        (await session.execute(select(models.Vehicle.status, func.count()).group_by(models.Vehicle.status))).all()
    )
    return {status.value: counts.get(status, 0) for status in VehicleStatus}


async def fuel_costs(session: AsyncSession, months: int, today: date | None = None) -> list[MonthlyAmount]:
    buckets = month_buckets(months, today)
    totals = dict.fromkeys(buckets, 0.0)
    result = await session.execute(
        select(models.Refuel.refuel_date, models.Refuel.amount).where(
            models.Refuel.refuel_date >= first_day(buckets[0])
        )
    )
    for refuel_date, amount in result.all():
        key = month_key(refuel_date)
        if key in totals:
            totals[key] += amount or 0.0
    return [MonthlyAmount(month=key, amount=round(value, 2)) for key, value in totals.items()]


async def expense_balances(session: AsyncSession, months: int, today: date | None = None) -> list[ExpenseBalance]:
    """Expense-report totals per creation month."""

    buckets = month_buckets(months, today)
    totals = {key: [0.0, 0.0, 0.0] for key in buckets}
    result = await session.execute(
        select(
            models.ExpenseReport.creation_date,
            models.ExpenseReport.total,
            models.ExpenseReport.reimbursable,
            models.ExpenseReport.non_reimbursable,
        ).where(models.ExpenseReport.creation_date >= first_day(buckets[0]))
    )
    for creation_date, total, reimbursable, non_reimbursable in result.all():
        bucket = totals.get(month_key(creation_date))
        if bucket is None:
            continue
        bucket[0] += total or 0.0
        bucket[1] += reimbursable or 0.0
        bucket[2] += non_reimbursable or 0.0
    return [
        ExpenseBalance(
            month=key,
            total=round(values[0], 2),
            reimbursable=round(values[1], 2),
            non_reimbursable=round(values[2], 2),
        )
        for key, values in totals.items()
    ]


async def upcoming_tasks(session: AsyncSession, limit: int = 10) -> list[UpcomingTask]:
    result = await session.execute(
        select(models.VehicleTask, models.Vehicle.plate, models.TaskType.code)
        .join(models.Vehicle, models.Vehicle.id == models.VehicleTask.vehicle_id)
        .join(models.TaskType, models.TaskType.id == models.VehicleTask.task_type_id)
        .where(models.VehicleTask.status == TaskStatus.OPEN)
        .order_by(models.VehicleTask.due_date.is_(None), models.VehicleTask.due_date, models.VehicleTask.id)
        .limit(limit)
    )
    return [
        UpcomingTask(
            id=task.id,
            vehicle_id=task.vehicle_id,
            plate=plate,
            task_type=code,
            due_date=task.due_date,
            due_mileage=task.due_mileage,
        )
        for task, plate, code in result.all()
    ]


async def pending_reports(session: AsyncSession, limit: int = 10) -> list[models.ExpenseReport]:
    result = await session.execute(
        select(models.ExpenseReport)
        .where(models.ExpenseReport.status == ExpenseStatus.SUBMITTED)
        .order_by(models.ExpenseReport.submit_date, models.ExpenseReport.id)
        .limit(limit)
    )
    return list(result.scalars().all())


async def build_dashboard(session: AsyncSession, months: int, warning_days: int) -> Dashboard:
    return Dashboard(
        metrics=await metrics(session),
        vehicle_status=await vehicle_status_counts(session),
        fuel_costs=await fuel_costs(session, months),
        expense_balances=await expense_balances(session, months),
        upcoming_tasks=await upcoming_tasks(session),
        upcoming_compliance=[
            ComplianceItemRead.model_validate(item)
            for item in await compliance.upcoming_items(session, warning_days)
        ],
        pending_expense_reports=[
            ExpenseReportRead.model_validate(report) for report in await pending_reports(session)
        ],
        expiring_policies=[
            InsuranceRead.model_validate(policy) for policy in await contracts.expiring_insurances(session)
        ],
        document_statistics=await documents.document_statistics(session, warning_days),
    )

