"""Employee and employee-role endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Employee, EmployeeRole
from ..schemas import EmployeeCreate, EmployeeRead, NameCreate, NameRead, Page
from ..services import employees as service
from ..storage import FileStorage

router = APIRouter(prefix="/fleet/employees", tags=["employees"])
roles_router = APIRouter(prefix="/fleet/employee-roles", tags=["employees"])


@router.get("/", response_model=Page[EmployeeRead])
async def list_employees(
    keyword: str | None = None,
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=200),
    session: AsyncSession = Depends(get_db_session),
) -> dict:
    """Return one page of employees, optionally filtered by name."""

    return await service.list_employees(session, keyword, page, size)


@router.get("/available", response_model=list[EmployeeRead])
async def available_employees(session: AsyncSession = Depends(get_db_session)) -> Sequence[Employee]:
    """Employees without an active employment."""

    return await service.available_employees(session)


@router.get("/without-fuel-card", response_model=list[EmployeeRead])
async def employees_without_fuel_card(session: AsyncSession = Depends(get_db_session)) -> Sequence[Employee]:
    return await service.employees_without_fuel_card(session)


@router.get("/{employee_id}", response_model=EmployeeRead)
async def get_employee(employee_id: int, session: AsyncSession = Depends(get_db_session)) -> Employee:
    return await service.get_employee(session, employee_id)


@router.post("/", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Employee:
    """Create an employee and its document directory."""

    return await service.create_employee(session, storage, payload)


@router.put("/{employee_id}", response_model=EmployeeRead)
@router.post("/{employee_id}/edit", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    payload: EmployeeCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Employee:
    return await service.update_employee(session, employee_id, payload)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
@router.post("/{employee_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    """Delete an employee together with everything that belongs to them."""

    await service.delete_employee(session, storage, employee_id)


@roles_router.get("/", response_model=list[NameRead])
async def list_roles(session: AsyncSession = Depends(get_db_session)) -> Sequence[EmployeeRole]:
    return await service.list_roles(session)


@roles_router.post("/", response_model=NameRead, status_code=status.HTTP_201_CREATED)
async def create_role(payload: NameCreate, session: AsyncSession = Depends(get_db_session)) -> EmployeeRole:
    return await service.create_role(session, payload)
