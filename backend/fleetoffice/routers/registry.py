"""Supplier and project endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Project, Supplier
from ..models.enums import ProjectStatus
from ..schemas import ProjectCreate, ProjectRead, SupplierCreate, SupplierRead
from ..services import registry as service
from ..storage import FileStorage

suppliers_router = APIRouter(prefix="/settings/suppliers", tags=["registry"])
projects_router = APIRouter(prefix="/settings/projects", tags=["registry"])


@suppliers_router.get("/", response_model=list[SupplierRead])
async def list_suppliers(
    keyword: str | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Supplier]:
    return await service.list_suppliers(session, keyword)


@suppliers_router.get("/{supplier_id}", response_model=SupplierRead)
async def get_supplier(supplier_id: int, session: AsyncSession = Depends(get_db_session)) -> Supplier:
    return await service.get_supplier(session, supplier_id)


@suppliers_router.post("/", response_model=SupplierRead, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    payload: SupplierCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Supplier:
    return await service.create_supplier(session, storage, payload)


@suppliers_router.put("/{supplier_id}", response_model=SupplierRead)
async def update_supplier(
    supplier_id: int,
    payload: SupplierCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Supplier:
    return await service.update_supplier(session, supplier_id, payload)


@suppliers_router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(
    supplier_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    """Delete a supplier that no contract references."""

    await service.delete_supplier(session, storage, supplier_id)


@projects_router.get("/", response_model=list[ProjectRead])
async def list_projects(
    status: ProjectStatus | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Project]:
    return await service.list_projects(session, status)


@projects_router.get("/active", response_model=list[ProjectRead])
async def active_projects(session: AsyncSession = Depends(get_db_session)) -> Sequence[Project]:
    return await service.list_projects(session, ProjectStatus.ACTIVE)


@projects_router.get("/{project_id}", response_model=ProjectRead)
async def get_project(project_id: int, session: AsyncSession = Depends(get_db_session)) -> Project:
    return await service.get_project(session, project_id)


@projects_router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Project:
    return await service.create_project(session, storage, payload)


@projects_router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: int,
    payload: ProjectCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Project:
    return await service.update_project(session, project_id, payload)


@projects_router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_project(session, storage, project_id)
