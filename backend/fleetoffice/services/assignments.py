"""Vehicle assignments and the vehicle status they drive."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import AssignmentStatus, EmploymentStatus, OwnerType, VehicleStatus
from ..schemas import AssignmentCreate
from ..storage import FileStorage
from .common import delete_now, ensure_exists, get_or_404
from .documents import init_owner_directory, purge_owner_documents

logger = logging.getLogger(__name__)


def _active_clause(today: date):
    return (
        models.Assignment.status == AssignmentStatus.ASSIGNED,
        or_(models.Assignment.end_date.is_(None), models.Assignment.end_date >= today),
    )


async def _has_active(
    session: AsyncSession, column, value: int, today: date, exclude_id: int | None = None
) -> bool:
    stmt = select(func.count()).select_from(models.Assignment).where(column == value, *_active_clause(today))
    if exclude_id is not None:
        stmt = stmt.where(models.Assignment.id != exclude_id)
    return bool(await session.scalar(stmt))


async def vehicle_errors(session: AsyncSession, vehicle: models.Vehicle, today: date) -> list[str]:
    """Reasons a vehicle cannot be handed out today."""

    errors = []
    if vehicle.status != VehicleStatus.IN_SERVICE:
        errors.append(f"Vehicle {vehicle.plate} is not in service")
    if await _has_active(session, models.Assignment.vehicle_id, vehicle.id, today):
        errors.append(f"Vehicle {vehicle.plate} is already assigned")
    if vehicle.insurance_expiry is not None and vehicle.insurance_expiry < today:
        errors.append(f"Insurance of vehicle {vehicle.plate} has expired")
    if vehicle.car_tax_expiry is not None and vehicle.car_tax_expiry < today:
        errors.append(f"Road tax of vehicle {vehicle.plate} has expired")
    return errors


async def employment_errors(session: AsyncSession, employment: models.Employment, today: date) -> list[str]:
    errors = []
    if employment.status != EmploymentStatus.ACTIVE:
        errors.append(f"Employment {employment.matricola} is not active")
    if await _has_active(session, models.Assignment.employment_id, employment.id, today):
        errors.append(f"Employment {employment.matricola} already has an assigned vehicle")
    return errors


def _date_errors(payload: AssignmentCreate) -> list[str]:
    if payload.start_date is None:
        return ["Start date is required"]
    if payload.end_date is not None and payload.end_date < payload.start_date:
        return ["End date must not precede start date"]
    return []


async def _free_vehicle(session: AsyncSession, vehicle_id: int, today: date, exclude_id: int | None = None) -> None:
    vehicle = await session.get(models.Vehicle, vehicle_id)
    if vehicle is None or vehicle.status != VehicleStatus.ASSIGNED:
        return
    if not await _has_active(session, models.Assignment.vehicle_id, vehicle_id, today, exclude_id):
        vehicle.status = VehicleStatus.IN_SERVICE


def _sync_vehicle(vehicle: models.Vehicle, assignment: models.Assignment, today: date) -> None:
    if vehicle.status in (VehicleStatus.IN_SERVICE, VehicleStatus.ASSIGNED):
        vehicle.status = VehicleStatus.ASSIGNED if assignment.is_active(today) else VehicleStatus.IN_SERVICE


async def list_assignments(session: AsyncSession, status: AssignmentStatus | None = None) -> list[models.Assignment]:
    stmt = select(models.Assignment)
    if status is not None:
        stmt = stmt.where(models.Assignment.status == status)
    result = await session.execute(stmt.order_by(models.Assignment.start_date.desc(), models.Assignment.id.desc()))
    return list(result.scalars().all())


async def get_assignment(session: AsyncSession, assignment_id: int) -> models.Assignment:
    return await get_or_404(session, models.Assignment, assignment_id, "Assignment")


async def assignments_of_vehicle(session: AsyncSession, vehicle_id: int) -> list[models.Assignment]:
    await get_or_404(session, models.Vehicle, vehicle_id, "Vehicle")
    result = await session.execute(
        select(models.Assignment)
        .where(models.Assignment.vehicle_id == vehicle_id)
        .order_by(models.Assignment.start_date.desc(), models.Assignment.id.desc())
    )
    return list(result.scalars().all())


async def create_assignment(session: AsyncSession, storage: FileStorage, payload: AssignmentCreate) -> models.Assignment:
    """Hand a vehicle to an employment after checking both are free."""

    today = date.today()
    vehicle = await get_or_404(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    employment = await get_or_404(session, models.Employment, payload.employment_id, "Employment")
    await ensure_exists(session, models.Project, payload.project_id, "Project")

    errors = await vehicle_errors(session, vehicle, today)
    errors += await employment_errors(session, employment, today)
    errors += _date_errors(payload)
    if errors:
        logger.warning("Assignment rejected: %s", "; ".join(errors))
        raise BusinessValidationError("Assignment not allowed", errors)

    values = payload.model_dump()
    values["status"] = payload.status or AssignmentStatus.ASSIGNED
    assignment = models.Assignment(**values)
    session.add(assignment)
    _sync_vehicle(vehicle, assignment, today)
    await session.commit()
    init_owner_directory(storage, OwnerType.ASSIGNMENT, assignment)
    logger.info("Assigned vehicle %s to employment %s", vehicle.plate, employment.matricola)
    return assignment


async def update_assignment(session: AsyncSession, assignment_id: int, payload: AssignmentCreate) -> models.Assignment:
    today = date.today()
    assignment = await get_assignment(session, assignment_id)
    vehicle = await get_or_404(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    employment = await get_or_404(session, models.Employment, payload.employment_id, "Employment")
    await ensure_exists(session, models.Project, payload.project_id, "Project")

    errors = _date_errors(payload)
    previous_vehicle_id = assignment.vehicle_id
    if payload.vehicle_id != previous_vehicle_id:
        errors += await vehicle_errors(session, vehicle, today)
    if payload.employment_id != assignment.employment_id:
        errors += await employment_errors(session, employment, today)
    if errors:
        logger.warning("Assignment %s update rejected: %s", assignment_id, "; ".join(errors))
        raise BusinessValidationError("Assignment not allowed", errors)

    values = payload.model_dump()
    values["status"] = payload.status or assignment.status
    for key, value in values.items():
        setattr(assignment, key, value)
    await session.flush()
    if previous_vehicle_id != vehicle.id:
        await _free_vehicle(session, previous_vehicle_id, today)
    _sync_vehicle(vehicle, assignment, today)
    await session.commit()
    return assignment


async def remove_assignment(session: AsyncSession, storage: FileStorage, assignment: models.Assignment) -> None:
    """Delete an assignment and its documents, freeing its vehicle; the caller commits."""

    today = date.today()
    was_active = assignment.is_active(today)
    vehicle_id = assignment.vehicle_id
    await purge_owner_documents(session, storage, OwnerType.ASSIGNMENT, assignment)
    await delete_now(session, assignment)
    if was_active:
        await _free_vehicle(session, vehicle_id, today)


async def delete_assignment(session: AsyncSession, storage: FileStorage, assignment_id: int) -> None:
    assignment = await get_assignment(session, assignment_id)
    await remove_assignment(session, storage, assignment)
    await session.commit()
    logger.info("Deleted assignment %s", assignment_id)


async def release_expired(session: AsyncSession) -> int:
    """Mark ASSIGNED assignments that ended before today as RETURNED."""

    today = date.today()
    result = await session.execute(
        select(models.Assignment).where(
            models.Assignment.status == AssignmentStatus.ASSIGNED,
            models.Assignment.end_date.is_not(None),
            models.Assignment.end_date < today,
        )
    )
    expired = list(result.scalars().all())
    for assignment in expired:
        assignment.status = AssignmentStatus.RETURNED
    await session.flush()
    for vehicle_id in {assignment.vehicle_id for assignment in expired}:
        await _free_vehicle(session, vehicle_id, today)
    await session.commit()
    if expired:
        logger.info("Released %s expired assignments", len(expired))
    return len(expired)
