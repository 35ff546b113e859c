"""Safety compliance endpoints."""
from datetime import date
from typing import Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import ComplianceCategory, ComplianceItem
from ..schemas import ComplianceItemCreate, ComplianceItemRead, NameCreate, NameRead
from ..services import compliance as service
from ..storage import FileStorage

categories_router = APIRouter(prefix="/safety/categories", tags=["compliance"])
items_router = APIRouter(prefix="/safety/items", tags=["compliance"])


@categories_router.get("/", response_model=list[NameRead])
async def list_categories(session: AsyncSession = Depends(get_db_session)) -> Sequence[ComplianceCategory]:
    return await service.list_categories(session)


@categories_router.post("/", response_model=NameRead, status_code=status.HTTP_201_CREATED)
async def create_category(payload: NameCreate, session: AsyncSession = Depends(get_db_session)) -> ComplianceCategory:
    return await service.create_category(session, payload)


@items_router.get("/", response_model=list[ComplianceItemRead])
async def search_items(
    category_id: int | None = None,
    project_id: int | None = None,
    employee_id: int | None = None,
    due_from: date | None = None,
    due_to: date | None = None,
    expired: bool | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[ComplianceItem]:
    return await service.search_items(session, category_id, project_id, employee_id, due_from, due_to, expired)


@items_router.get("/upcoming", response_model=list[ComplianceItemRead])
async def upcoming_items(
    days: int = Query(default=30, ge=0),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[ComplianceItem]:
    """Items due within ``days``, overdue ones included."""

    return await service.upcoming_items(session, days)


@items_router.get("/{item_id}", response_model=ComplianceItemRead)
async def get_item(item_id: int, session: AsyncSession = Depends(get_db_session)) -> ComplianceItem:
    return await service.get_item(session, item_id)


@items_router.post("/", response_model=ComplianceItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: ComplianceItemCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> ComplianceItem:
    return await service.create_item(session, storage, payload)


@items_router.put("/{item_id}", response_model=ComplianceItemRead)
async def update_item(
    item_id: int,
    payload: ComplianceItemCreate,
    session: AsyncSession = Depends(get_db_session),
) -> ComplianceItem:
    return await service.update_item(session, item_id, payload)


@items_router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_item(session, storage, item_id)
