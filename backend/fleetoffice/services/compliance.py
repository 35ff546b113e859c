"""Compliance (safety) categories and items."""
from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import OwnerType
from ..schemas import ComplianceItemCreate, NameCreate
from ..storage import FileStorage
from .common import apply, delete_now, ensure_exists, ensure_unique, get_or_404
from .documents import init_owner_directory, purge_owner_documents

logger = logging.getLogger(__name__)


def add_years(start: date, years: int) -> date:
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        # 29 February in a non-leap year
        return start.replace(year=start.year + years, day=28)


def due_date_for(visit_date: date | None, periodicity_years: int | None, due_date: date | None) -> date | None:
    """Visit date plus periodicity when both are known, else the given due date."""

    if visit_date is not None and periodicity_years is not None:
        return add_years(visit_date, periodicity_years)
    return due_date


async def list_categories(session: AsyncSession) -> list[models.ComplianceCategory]:
    result = await session.execute(select(models.ComplianceCategory).order_by(models.ComplianceCategory.name))
    return list(result.scalars().all())


async def create_category(session: AsyncSession, payload: NameCreate) -> models.ComplianceCategory:
    name = payload.name.strip()
    await ensure_unique(session, models.ComplianceCategory, "name", name, label="Compliance category")
    category = models.ComplianceCategory(name=name)
    session.add(category)
    await session.commit()
    return category


async def _values(session: AsyncSession, payload: ComplianceItemCreate) -> dict:
    await get_or_404(session, models.ComplianceCategory, payload.category_id, "Compliance category")
    await ensure_exists(session, models.Employee, payload.employee_id, "Employee")
    await ensure_exists(session, models.Project, payload.project_id, "Project")
    values = payload.model_dump()
    values["due_date"] = due_date_for(payload.visit_date, payload.periodicity_years, payload.due_date)
    if values["due_date"] is None:
        raise BusinessValidationError("Due date is required (or visit date and periodicity)")
    return values


async def create_item(session: AsyncSession, storage: FileStorage, payload: ComplianceItemCreate) -> models.ComplianceItem:
    item = models.ComplianceItem(**await _values(session, payload))
    session.add(item)
    await session.commit()
    init_owner_directory(storage, OwnerType.COMPLIANCE_ITEM, item)
    logger.info("Created compliance item %s due %s", item.id, item.due_date)
    return item


async def get_item(session: AsyncSession, item_id: int) -> models.ComplianceItem:
    return await get_or_404(session, models.ComplianceItem, item_id, "Compliance item")


async def update_item(session: AsyncSession, item_id: int, payload: ComplianceItemCreate) -> models.ComplianceItem:
    item = await get_item(session, item_id)
    apply(item, await _values(session, payload))
    await session.commit()
    return item


async def delete_item(session: AsyncSession, storage: FileStorage, item_id: int) -> None:
    item = await get_item(session, item_id)
    await purge_owner_documents(session, storage, OwnerType.COMPLIANCE_ITEM, item)
    await delete_now(session, item)
    await session.commit()
    logger.info("Deleted compliance item %s", item_id)


async def search_items(
    session: AsyncSession,
    category_id: int | None = None,
    project_id: int | None = None,
    employee_id: int | None = None,
    due_from: date | None = None,
    due_to: date | None = None,
    expired: bool | None = None,
) -> list[models.ComplianceItem]:
    stmt = select(models.ComplianceItem)
    if category_id is not None:
        stmt = stmt.where(models.ComplianceItem.category_id == category_id)
    if project_id is not None:
        stmt = stmt.where(models.ComplianceItem.project_id == project_id)
    if employee_id is not None:
        stmt = stmt.where(models.ComplianceItem.employee_id == employee_id)
    if due_from is not None:
        stmt = stmt.where(models.ComplianceItem.due_date >= due_from)
    if due_to is not None:
        stmt = stmt.where(models.ComplianceItem.due_date <= due_to)
    if expired is True:
        stmt = stmt.where(models.ComplianceItem.due_date < date.today())
    elif expired is False:
        stmt = stmt.where(models.ComplianceItem.due_date >= date.today())
    result = await session.execute(stmt.order_by(models.ComplianceItem.due_date, models.ComplianceItem.id))
    return list(result.scalars().all())


async def upcoming_items(session: AsyncSession, days: int) -> list[models.ComplianceItem]:
    """Items due before today + ``days``, overdue ones included."""

    threshold = date.today() + timedelta(days=days)
    result = await session.execute(
        select(models.ComplianceItem)
        .where(models.ComplianceItem.due_date < threshold)
        .order_by(models.ComplianceItem.due_date)
    )
    return list(result.scalars().all())
