"""Maintenance records and the scheduled vehicle tasks they roll over."""
from __future__ import annotations

import calendar
import logging
from datetime import date

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import OwnerType, TaskStatus
from ..schemas import AutoTaskSelection, MaintenanceCreate, TaskTypeCreate, VehicleTaskCreate
from ..storage import FileStorage
from .common import delete_now, ensure_exists, ensure_unique, get_or_404, like
from .documents import purge_owner_documents

logger = logging.getLogger(__name__)

TYRE_CHANGE_SUMMER = "TYRE_CHANGE_SUMMER"
TYRE_CHANGE_WINTER = "TYRE_CHANGE_WINTER"
REVISION = "REVISION"
ORDINARY_SERVICE = "ORDINARY_SERVICE"


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_due(task_type: models.TaskType, done_on: date, mileage: int | None) -> tuple[date | None, int | None]:
    """Due date and mileage of the task that follows one done on ``done_on``."""

    code = task_type.code.upper()
    if code == TYRE_CHANGE_SUMMER:
        return date(done_on.year + 1, 4, 15), None
    if code == TYRE_CHANGE_WINTER:
        return date(done_on.year + 1, 11, 15), None
    due_date = add_months(done_on, task_type.months_interval) if task_type.months_interval else None
    if code == REVISION:
        return due_date, None
    due_mileage = None
    if mileage is not None and task_type.km_interval:
        due_mileage = mileage + task_type.km_interval
    return due_date, due_mileage


# code, description, by date, by mileage, months, km, auto
DEFAULT_TASK_TYPES = (
    ("ORDINARY_SERVICE", "Ordinary service", True, True, 12, 20000, True),
    ("REVISION", "Revision", True, False, 24, None, True),
    ("EXTRA_SERVICE", "Extraordinary maintenance", True, True, None, None, False),
    (TYRE_CHANGE_SUMMER, "Summer tyre change", True, False, 6, None, True),
    (TYRE_CHANGE_WINTER, "Winter tyre change", True, False, 6, None, True),
    ("OTHER", "Other", True, False, None, None, False),
)


async def seed_task_types(session: AsyncSession) -> int:
    """Create the default task types that do not exist yet."""

    existing = set((await session.execute(select(models.TaskType.code))).scalars().all())
    created = 0
    for code, description, by_date, by_mileage, months, km, auto in DEFAULT_TASK_TYPES:
        if code in existing:
            continue
        session.add(
            models.TaskType(
                code=code,
                description=description,
                by_date=by_date,
                by_mileage=by_mileage,
                months_interval=months,
                km_interval=km,
                auto=auto,
            )
        )
        created += 1
    if created:
        await session.commit()
        logger.info("Seeded %s default task types", created)
    return created


def _next_on_or_after(reference: date, month: int, day: int) -> date:
    candidate = date(reference.year, month, day)
    return candidate if candidate > reference else date(reference.year + 1, month, day)


def initial_due(
    vehicle: models.Vehicle, task_type: models.TaskType, today: date | None = None
) -> tuple[date | None, int | None]:
    """Due date and mileage of the first task of a type for a vehicle."""

    reference = vehicle.contract_start_date or vehicle.registration_date or today or date.today()
    base = vehicle.current_mileage or 0
    code = task_type.code.upper()
    if code == REVISION:
        return add_months(reference, 48), None
    if code == ORDINARY_SERVICE:
        return add_months(reference, task_type.months_interval or 12), base + (task_type.km_interval or 20000)
    if code == TYRE_CHANGE_SUMMER:
        return _next_on_or_after(reference, 4, 15), None
    if code == TYRE_CHANGE_WINTER:
        return _next_on_or_after(reference, 11, 15), None
    due_date = add_months(reference, task_type.months_interval) if task_type.months_interval else None
    due_mileage = base + task_type.km_interval if task_type.km_interval else None
    return due_date, due_mileage


async def _open_task(session: AsyncSession, vehicle_id: int, task_type_id: int) -> models.VehicleTask | None:
    return await session.scalar(
        select(models.VehicleTask)
        .where(
            models.VehicleTask.vehicle_id == vehicle_id,
            models.VehicleTask.task_type_id == task_type_id,
            models.VehicleTask.status == TaskStatus.OPEN,
        )
        .order_by(models.VehicleTask.due_date.is_(None), models.VehicleTask.due_date)
        .limit(1)
    )


def _first_task(vehicle: models.Vehicle, task_type: models.TaskType) -> models.VehicleTask:
    due_date, due_mileage = initial_due(vehicle, task_type)
    return models.VehicleTask(
        vehicle_id=vehicle.id,
        task_type_id=task_type.id,
        due_date=due_date,
        due_mileage=due_mileage,
        status=TaskStatus.OPEN,
        executed=False,
    )


async def _auto_types(session: AsyncSession) -> list[models.TaskType]:
    result = await session.execute(
        select(models.TaskType).where(models.TaskType.auto.is_(True)).order_by(models.TaskType.code)
    )
    return list(result.scalars().all())


async def ensure_tasks(session: AsyncSession, vehicle: models.Vehicle) -> int:
    """Add an OPEN task for every automatic type the vehicle lacks; the caller commits."""

    created = 0
    for task_type in await _auto_types(session):
        if await _open_task(session, vehicle.id, task_type.id) is None:
            session.add(_first_task(vehicle, task_type))
            created += 1
    if created:
        await session.flush()
        logger.info("Created %s automatic tasks for vehicle %s", created, vehicle.plate)
    return created


async def ensure_vehicle_tasks(session: AsyncSession, vehicle_id: int) -> list[models.VehicleTask]:
    vehicle = await get_or_404(session, models.Vehicle, vehicle_id, "Vehicle")
    await ensure_tasks(session, vehicle)
    await session.commit()
    return await list_tasks(session, vehicle_id, open_only=True)


async def update_auto_tasks(
    session: AsyncSession, vehicle_id: int, payload: AutoTaskSelection
) -> list[models.VehicleTask]:
    """Keep open tasks only for the selected automatic types of a vehicle."""

    vehicle = await get_or_404(session, models.Vehicle, vehicle_id, "Vehicle")
    auto_types = await _auto_types(session)
    known = {task_type.id for task_type in auto_types}
    unknown = [type_id for type_id in payload.task_type_ids if type_id not in known]
    if unknown:
        raise BusinessValidationError(
            "Invalid task selection", [f"Task type {type_id} is not automatic" for type_id in unknown]
        )

    enabled = set(payload.task_type_ids)
    for task_type in auto_types:
        existing = await _open_task(session, vehicle_id, task_type.id)
        if task_type.id in enabled and existing is None:
            session.add(_first_task(vehicle, task_type))
        elif task_type.id not in enabled and existing is not None:
            await delete_now(session, existing)
    await session.commit()
    return await list_tasks(session, vehicle_id, open_only=True)


async def roll_over_task(session: AsyncSession, record: models.Maintenance) -> models.VehicleTask | None:
    """Close the open task matching a maintenance and schedule the next one."""

    if record.task_type_id is None:
        return None
    task_type = await session.get(models.TaskType, record.task_type_id)
    if task_type is None or not task_type.auto:
        return None
    open_task = await _open_task(session, record.vehicle_id, record.task_type_id)
    if open_task is None:
        return None
    open_task.status = TaskStatus.CLOSED
    open_task.executed = True
    due_date, due_mileage = next_due(task_type, record.service_date, record.mileage)
    next_task = models.VehicleTask(
        vehicle_id=record.vehicle_id,
        task_type_id=record.task_type_id,
        due_date=due_date,
        due_mileage=due_mileage,
        status=TaskStatus.OPEN,
        executed=False,
    )
    session.add(next_task)
    logger.info("Task %s closed, next %s due %s / %s km", open_task.id, task_type.code, due_date, due_mileage)
    return next_task


async def list_maintenance(
    session: AsyncSession,
    plate: str | None = None,
    year: int | None = None,
    task_type_id: int | None = None,
) -> list[models.Maintenance]:
    stmt = select(models.Maintenance).join(models.Vehicle, models.Vehicle.id == models.Maintenance.vehicle_id)
    if plate:
        stmt = stmt.where(func.lower(models.Vehicle.plate).like(like(plate)))
    if year is not None:
        stmt = stmt.where(extract("year", models.Maintenance.service_date) == year)
    if task_type_id is not None:
        stmt = stmt.where(models.Maintenance.task_type_id == task_type_id)
    result = await session.execute(stmt.order_by(models.Maintenance.service_date.desc(), models.Maintenance.id.desc()))
    return list(result.scalars().all())


async def get_maintenance(session: AsyncSession, maintenance_id: int) -> models.Maintenance:
    return await get_or_404(session, models.Maintenance, maintenance_id, "Maintenance")


async def _save(session: AsyncSession, record: models.Maintenance, payload: MaintenanceCreate) -> models.Maintenance:
    vehicle = await get_or_404(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    await ensure_exists(session, models.Supplier, payload.supplier_id, "Supplier")
    await ensure_exists(session, models.TaskType, payload.task_type_id, "Task type")
    for key, value in payload.model_dump().items():
        setattr(record, key, value)
    session.add(record)
    if payload.mileage is not None and payload.mileage > (vehicle.current_mileage or 0):
        vehicle.current_mileage = payload.mileage
    await session.flush()
    await roll_over_task(session, record)
    await session.commit()
    return record


async def create_maintenance(session: AsyncSession, payload: MaintenanceCreate) -> models.Maintenance:
    record = await _save(session, models.Maintenance(), payload)
    logger.info("Recorded maintenance %s for vehicle %s", record.id, record.vehicle_id)
    return record


async def update_maintenance(session: AsyncSession, maintenance_id: int, payload: MaintenanceCreate) -> models.Maintenance:
    record = await get_maintenance(session, maintenance_id)
    return await _save(session, record, payload)


async def delete_maintenance(session: AsyncSession, storage: FileStorage, maintenance_id: int) -> None:
    record = await get_maintenance(session, maintenance_id)
    await purge_owner_documents(session, storage, OwnerType.MAINTENANCE, record)
    await delete_now(session, record)
    await session.commit()
    logger.info("Deleted maintenance %s", maintenance_id)


async def yearly_stats(session: AsyncSession, year: int) -> dict:
    row = (
        await session.execute(
            select(func.count(models.Maintenance.id), func.coalesce(func.sum(models.Maintenance.cost), 0.0)).where(
                extract("year", models.Maintenance.service_date) == year
            )
        )
    ).one()
    count, total = row[0] or 0, float(row[1] or 0.0)
    return {
        "year": year,
        "count": count,
        "total_cost": round(total, 2),
        "average_cost": round(total / count, 2) if count else 0.0,
    }


async def list_task_types(session: AsyncSession) -> list[models.TaskType]:
    result = await session.execute(select(models.TaskType).order_by(models.TaskType.code))
    return list(result.scalars().all())


async def create_task_type(session: AsyncSession, payload: TaskTypeCreate) -> models.TaskType:
    values = payload.model_dump()
    values["code"] = values["code"].strip().upper()
    await ensure_unique(session, models.TaskType, "code", values["code"], label="Task type")
    task_type = models.TaskType(**values)
    session.add(task_type)
    await session.commit()
    return task_type


async def list_tasks(
    session: AsyncSession, vehicle_id: int | None = None, open_only: bool = False
) -> list[models.VehicleTask]:
    """Vehicle tasks by due date; undated tasks last."""

    stmt = select(models.VehicleTask)
    if vehicle_id is not None:
        stmt = stmt.where(models.VehicleTask.vehicle_id == vehicle_id)
    if open_only:
        stmt = stmt.where(models.VehicleTask.status == TaskStatus.OPEN)
    result = await session.execute(
        stmt.order_by(
            models.VehicleTask.due_date.is_(None),
            models.VehicleTask.due_date,
            models.VehicleTask.id,
        )
    )
    return list(result.scalars().all())


async def create_task(session: AsyncSession, payload: VehicleTaskCreate) -> models.VehicleTask:
    await get_or_404(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    await get_or_404(session, models.TaskType, payload.task_type_id, "Task type")
    task = models.VehicleTask(**payload.model_dump(), status=TaskStatus.OPEN, executed=False)
    session.add(task)
    await session.commit()
    return task


async def close_task(session: AsyncSession, task_id: int) -> models.VehicleTask:
    task = await get_or_404(session, models.VehicleTask, task_id, "Vehicle task")
    task.status = TaskStatus.CLOSED
    task.executed = True
    await session.commit()
    return task


async def delete_task(session: AsyncSession, task_id: int) -> None:
    task = await get_or_404(session, models.VehicleTask, task_id, "Vehicle task")
    await delete_now(session, task)
    await session.commit()
