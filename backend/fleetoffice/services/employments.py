"""Employment records and their status lifecycle."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError, require_date_order
from ..models.enums import AssignmentStatus, EmploymentStatus, OwnerType
from ..schemas import EmploymentCreate
from ..storage import FileStorage
from .assignments import remove_assignment
from .common import apply, delete_now, ensure_unique, get_or_404, like
from .documents import init_owner_directory, purge_owner_documents

logger = logging.getLogger(__name__)


async def terminate_expired(session: AsyncSession) -> int:
    """Mark ACTIVE employments whose end date has passed as TERMINATED."""

    result = await session.execute(
        update(models.Employment)
        .where(
            models.Employment.status == EmploymentStatus.ACTIVE,
            models.Employment.end_date.is_not(None),
            models.Employment.end_date < date.today(),
        )
        .values(status=EmploymentStatus.TERMINATED)
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount:
        await session.commit()
        logger.info("Terminated %s expired employments", result.rowcount)
    return result.rowcount or 0


async def list_employments(
    session: AsyncSession, keyword: str | None = None, status: EmploymentStatus | None = None
) -> list[models.Employment]:
    await terminate_expired(session)
    stmt = select(models.Employment).join(models.Employee, models.Employee.id == models.Employment.employee_id)
    if keyword:
        pattern = like(keyword)
        stmt = stmt.where(
            or_(
                func.lower(models.Employment.matricola).like(pattern),
                func.lower(models.Employee.first_name).like(pattern),
                func.lower(models.Employee.last_name).like(pattern),
                func.lower(models.Employment.job_title).like(pattern),
            )
        )
    if status is not None:
        stmt = stmt.where(models.Employment.status == status)
    result = await session.execute(stmt.order_by(models.Employment.start_date.desc(), models.Employment.id))
    return list(result.scalars().all())


async def get_employment(session: AsyncSession, employment_id: int) -> models.Employment:
    await terminate_expired(session)
    return await get_or_404(session, models.Employment, employment_id, "Employment")


async def employments_of(session: AsyncSession, employee_id: int) -> list[models.Employment]:
    await terminate_expired(session)
    await get_or_404(session, models.Employee, employee_id, "Employee")
    result = await session.execute(
        select(models.Employment)
        .where(models.Employment.employee_id == employee_id)
        .order_by(models.Employment.start_date.desc())
    )
    return list(result.scalars().all())


async def count_by_status(session: AsyncSession) -> dict[str, int]:
    await terminate_expired(session)
    result = await session.execute(
        select(models.Employment.status, func.count()).group_by(models.Employment.status)
    )
    counts = {status.value: 0 for status in EmploymentStatus}
    for status, count in result.all():
        counts[status.value] = count
    return counts


async def _prepare(session: AsyncSession, payload: EmploymentCreate, employment_id: int | None = None) -> dict:
    await get_or_404(session, models.Employee, payload.employee_id, "Employee")
    require_date_order(payload.start_date, payload.end_date)
    values = payload.model_dump()
    values["matricola"] = values["matricola"].strip()
    await ensure_unique(session, models.Employment, "matricola", values["matricola"], employment_id, "Employment")
    if payload.end_date is not None and payload.end_date < date.today():
        values["status"] = EmploymentStatus.TERMINATED
    return values


async def create_employment(session: AsyncSession, storage: FileStorage, payload: EmploymentCreate) -> models.Employment:
    employment = models.Employment(**await _prepare(session, payload))
    init_owner_directory(storage, OwnerType.EMPLOYMENT, employment)
    session.add(employment)
    await session.commit()
    logger.info("Created employment %s (%s)", employment.id, employment.matricola)
    return employment


async def update_employment(session: AsyncSession, employment_id: int, payload: EmploymentCreate) -> models.Employment:
    employment = await get_or_404(session, models.Employment, employment_id, "Employment")
    apply(employment, await _prepare(session, payload, employment_id))
    await session.commit()
    return employment


async def terminate_employment(session: AsyncSession, employment_id: int, end_date: date) -> models.Employment:
    """Close an employment; it must not still hold a vehicle."""

    employment = await get_or_404(session, models.Employment, employment_id, "Employment")
    errors = []
    assigned = await session.scalar(
        select(func.count())
        .select_from(models.Assignment)
        .where(
            models.Assignment.employment_id == employment_id,
            models.Assignment.status == AssignmentStatus.ASSIGNED,
        )
    )
    if assigned:
        errors.append("Employment still has assigned vehicles")
    if end_date < employment.start_date:
        errors.append("End date must not precede start date")
    if errors:
        logger.warning("Termination of employment %s rejected: %s", employment_id, "; ".join(errors))
        raise BusinessValidationError("Employment cannot be terminated", errors)

    employment.end_date = end_date
    employment.status = EmploymentStatus.TERMINATED
    await session.commit()
    logger.info("Terminated employment %s on %s", employment_id, end_date)
    return employment


async def remove_employment(session: AsyncSession, storage: FileStorage, employment: models.Employment) -> None:
    """Delete an employment, its assignments and its documents; the caller commits."""

    assignments = await session.execute(
        select(models.Assignment).where(models.Assignment.employment_id == employment.id)
    )
    for assignment in assignments.scalars().all():
        await remove_assignment(session, storage, assignment)
    await purge_owner_documents(session, storage, OwnerType.EMPLOYMENT, employment)
    await delete_now(session, employment)


async def delete_employment(session: AsyncSession, storage: FileStorage, employment_id: int) -> None:
    employment = await get_or_404(session, models.Employment, employment_id, "Employment")
    await remove_employment(session, storage, employment)
    await session.commit()
    logger.info("Deleted employment %s", employment_id)
