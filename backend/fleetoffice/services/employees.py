"""Employee registry: personal data, roles and the cascade on delete."""
from __future__ import annotations

import logging

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError, NotFoundError
from ..models.enums import EmploymentStatus, OwnerType
from ..schemas import EmployeeCreate, NameCreate
from ..storage import FileStorage
from ..validators import (
    age_on,
    birth_date_errors,
    is_valid_fiscal_code,
    is_valid_iban,
    is_valid_phone,
    normalize_fiscal_code,
)
from .common import address_errors, apply, delete_now, ensure_unique, get_or_404, like
from .documents import init_owner_directory, purge_owner_documents
from .employments import remove_employment
from .expenses import remove_report

logger = logging.getLogger(__name__)


async def list_employees(
    session: AsyncSession, keyword: str | None = None, page: int = 1, size: int = 20
) -> dict:
    """Employees ordered by name, filtered on first/last name."""

    stmt = select(models.Employee)
    if keyword:
        pattern = like(keyword)
        stmt = stmt.where(
            or_(
                func.lower(models.Employee.first_name).like(pattern),
                func.lower(models.Employee.last_name).like(pattern),
            )
        )
    total = await session.scalar(select(func.count()).select_from(stmt.subquery()))
    result = await session.execute(
        stmt.order_by(models.Employee.last_name, models.Employee.first_name)
        .offset((page - 1) * size)
        .limit(size)
    )
    return {"items": list(result.scalars().all()), "total": total or 0, "page": page, "size": size}


async def get_employee(session: AsyncSession, employee_id: int) -> models.Employee:
    return await get_or_404(session, models.Employee, employee_id, "Employee")


async def _resolve_roles(session: AsyncSession, role_ids: list[int]) -> list[models.EmployeeRole]:
    if not role_ids:
        return []
    result = await session.execute(select(models.EmployeeRole).where(models.EmployeeRole.id.in_(role_ids)))
    roles = list(result.scalars().all())
    missing = set(role_ids) - {role.id for role in roles}
    if missing:
        raise NotFoundError("Employee role", sorted(missing)[0])
    return roles


async def _validate(session: AsyncSession, payload: EmployeeCreate, employee_id: int | None = None) -> dict:
    values = payload.model_dump(exclude={"role_ids"})
    values["fiscal_code"] = normalize_fiscal_code(values["fiscal_code"])
    if values.get("iban"):
        values["iban"] = values["iban"].replace(" ", "").upper()

    errors = []
    if not is_valid_fiscal_code(values["fiscal_code"]):
        errors.append("Invalid fiscal code")
    errors.extend(birth_date_errors(payload.birth_date))
    errors.extend(address_errors(payload))
    for field in ("phone", "mobile"):
        if not is_valid_phone(values.get(field)):
            errors.append(f"Invalid {field} number")
    if not is_valid_iban(values.get("iban")):
        errors.append("Invalid IBAN")
    if errors:
        logger.warning("Employee rejected: %s", "; ".join(errors))
        raise BusinessValidationError("Invalid employee data", errors)
    if age_on(payload.birth_date) < 18:
        logger.warning("Employee %s %s is a minor", payload.first_name, payload.last_name)

    await ensure_unique(session, models.Employee, "email", values.get("email"), employee_id, "Employee")
    await ensure_unique(session, models.Employee, "fiscal_code", values["fiscal_code"], employee_id, "Employee")
    return values


async def create_employee(session: AsyncSession, storage: FileStorage, payload: EmployeeCreate) -> models.Employee:
    values = await _validate(session, payload)
    employee = models.Employee(**values)
    employee.roles = await _resolve_roles(session, payload.role_ids)
    session.add(employee)
    await session.commit()
    init_owner_directory(storage, OwnerType.EMPLOYEE, employee)
    logger.info("Created employee %s (%s)", employee.id, employee.full_name)
    return employee


async def update_employee(session: AsyncSession, employee_id: int, payload: EmployeeCreate) -> models.Employee:
    employee = await get_employee(session, employee_id)
    values = await _validate(session, payload, employee_id)
    apply(employee, values)
    employee.roles = await _resolve_roles(session, payload.role_ids)
    await session.commit()
    return employee


async def delete_employee(session: AsyncSession, storage: FileStorage, employee_id: int) -> None:
    """Delete an employee together with everything that only exists for them."""

    employee = await get_employee(session, employee_id)
    await session.execute(
        update(models.FuelCard).where(models.FuelCard.employee_id == employee_id).values(employee_id=None)
    )

    reports = await session.execute(
        select(models.ExpenseReport).where(models.ExpenseReport.employee_id == employee_id)
    )
    for report in reports.scalars().all():
        await remove_report(session, storage, report)

    items = await session.execute(
        select(models.ComplianceItem).where(models.ComplianceItem.employee_id == employee_id)
    )
    for item in items.scalars().all():
        await purge_owner_documents(session, storage, OwnerType.COMPLIANCE_ITEM, item)
        await delete_now(session, item)

    employments = await session.execute(
        select(models.Employment).where(models.Employment.employee_id == employee_id)
    )
    for employment in employments.scalars().all():
        await remove_employment(session, storage, employment)

    await purge_owner_documents(session, storage, OwnerType.EMPLOYEE, employee)
    await session.delete(employee)
    await session.commit()
    logger.info("Deleted employee %s", employee_id)


async def available_employees(session: AsyncSession) -> list[models.Employee]:
    """Employees with no ACTIVE employment."""

    active = select(models.Employment.employee_id).where(models.Employment.status == EmploymentStatus.ACTIVE)
    result = await session.execute(
        select(models.Employee)
        .where(models.Employee.id.not_in(active))
        .order_by(models.Employee.last_name, models.Employee.first_name)
    )
    return list(result.scalars().all())


async def employees_without_fuel_card(session: AsyncSession) -> list[models.Employee]:
    holders = select(models.FuelCard.employee_id).where(models.FuelCard.employee_id.is_not(None))
    result = await session.execute(
        select(models.Employee)
        .where(models.Employee.id.not_in(holders))
        .order_by(models.Employee.last_name, models.Employee.first_name)
    )
    return list(result.scalars().all())


async def list_roles(session: AsyncSession) -> list[models.EmployeeRole]:
    result = await session.execute(select(models.EmployeeRole).order_by(models.EmployeeRole.name))
    return list(result.scalars().all())


async def create_role(session: AsyncSession, payload: NameCreate) -> models.EmployeeRole:
    name = payload.name.strip()
    await ensure_unique(session, models.EmployeeRole, "name", name, label="Employee role")
    role = models.EmployeeRole(name=name)
    session.add(role)
    await session.commit()
    return role
