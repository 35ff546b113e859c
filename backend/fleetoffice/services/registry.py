"""Suppliers and projects."""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import OwnerType, ProjectStatus
from ..schemas import ProjectCreate, SupplierCreate
from ..storage import FileStorage
from ..validators import is_valid_iban, is_valid_phone
from .common import address_errors, apply, delete_now, ensure_exists, ensure_unique, get_or_404, like
from .documents import init_owner_directory, purge_owner_documents

logger = logging.getLogger(__name__)


async def list_suppliers(session: AsyncSession, keyword: str | None = None) -> list[models.Supplier]:
    stmt = select(models.Supplier)
    if keyword:
        stmt = stmt.where(func.lower(models.Supplier.name).like(like(keyword)))
    result = await session.execute(stmt.order_by(models.Supplier.name))
    return list(result.scalars().all())


async def get_supplier(session: AsyncSession, supplier_id: int) -> models.Supplier:
    return await get_or_404(session, models.Supplier, supplier_id, "Supplier")


def _supplier_values(payload: SupplierCreate) -> dict:
    values = payload.model_dump()
    values["name"] = values["name"].strip()
    errors = address_errors(payload)
    if not is_valid_phone(payload.phone):
        errors.append("Invalid phone number")
    if not is_valid_iban(payload.iban):
        errors.append("Invalid IBAN")
    if errors:
        raise BusinessValidationError("Invalid supplier data", errors)
    return values


async def create_supplier(session: AsyncSession, storage: FileStorage, payload: SupplierCreate) -> models.Supplier:
    supplier = models.Supplier(**_supplier_values(payload))
    session.add(supplier)
    await session.commit()
    init_owner_directory(storage, OwnerType.SUPPLIER, supplier)
    logger.info("Created supplier %s (%s)", supplier.id, supplier.name)
    return supplier


async def update_supplier(session: AsyncSession, supplier_id: int, payload: SupplierCreate) -> models.Supplier:
    supplier = await get_supplier(session, supplier_id)
    apply(supplier, _supplier_values(payload))
    await session.commit()
    return supplier


async def delete_supplier(session: AsyncSession, storage: FileStorage, supplier_id: int) -> None:
    """Delete a supplier; contracts still referencing it make this fail."""

    supplier = await get_supplier(session, supplier_id)
    await delete_now(session, supplier)
    await purge_owner_documents(session, storage, OwnerType.SUPPLIER, supplier)
    await session.commit()
    logger.info("Deleted supplier %s", supplier_id)


async def list_projects(session: AsyncSession, status: ProjectStatus | None = None) -> list[models.Project]:
    stmt = select(models.Project)
    if status is not None:
        stmt = stmt.where(models.Project.status == status)
    result = await session.execute(stmt.order_by(models.Project.code))
    return list(result.scalars().all())


async def get_project(session: AsyncSession, project_id: int) -> models.Project:
    return await get_or_404(session, models.Project, project_id, "Project")


async def _project_values(session: AsyncSession, payload: ProjectCreate, project_id: int | None = None) -> dict:
    values = payload.model_dump()
    values["code"] = values["code"].strip()
    errors = address_errors(payload)
    if payload.start_date and payload.end_date and payload.end_date < payload.start_date:
        errors.append("End date must not precede start date")
    if errors:
        raise BusinessValidationError("Invalid project data", errors)
    await ensure_exists(session, models.Employee, payload.manager_id, "Employee")
    await ensure_unique(session, models.Project, "code", values["code"], project_id, "Project")
    return values


async def create_project(session: AsyncSession, storage: FileStorage, payload: ProjectCreate) -> models.Project:
    project = models.Project(**await _project_values(session, payload))
    session.add(project)
    await session.commit()
    init_owner_directory(storage, OwnerType.PROJECT, project)
    logger.info("Created project %s (%s)", project.id, project.code)
    return project


async def update_project(session: AsyncSession, project_id: int, payload: ProjectCreate) -> models.Project:
    project = await get_project(session, project_id)
    apply(project, await _project_values(session, payload, project_id))
    await session.commit()
    return project


async def delete_project(session: AsyncSession, storage: FileStorage, project_id: int) -> None:
    project = await get_project(session, project_id)
    await purge_owner_documents(session, storage, OwnerType.PROJECT, project)
    await delete_now(session, project)
    await session.commit()
    logger.info("Deleted project %s", project_id)
