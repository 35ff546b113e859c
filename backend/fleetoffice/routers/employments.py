"""Employment endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Employment
from ..models.enums import EmploymentStatus
from ..schemas import EmploymentCreate, EmploymentRead, EmploymentTerminate
from ..services import employments as service
from ..storage import FileStorage

router = APIRouter(prefix="/fleet/employments", tags=["employments"])


@router.get("/", response_model=list[EmploymentRead])
async def list_employments(
    keyword: str | None = None,
    status: EmploymentStatus | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Employment]:
    """Search employments by matricola, employee name or job title."""

    return await service.list_employments(session, keyword, status)


@router.get("/count-by-status")
async def count_by_status(session: AsyncSession = Depends(get_db_session)) -> dict[str, int]:
    return await service.count_by_status(session)


@router.get("/by-employee/{employee_id}", response_model=list[EmploymentRead])
async def employments_of(employee_id: int, session: AsyncSession = Depends(get_db_session)) -> Sequence[Employment]:
    return await service.employments_of(session, employee_id)


@router.get("/{employment_id}", response_model=EmploymentRead)
async def get_employment(employment_id: int, session: AsyncSession = Depends(get_db_session)) -> Employment:
    return await service.get_employment(session, employment_id)


@router.post("/", response_model=EmploymentRead, status_code=status.HTTP_201_CREATED)
async def create_employment(
    payload: EmploymentCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Employment:
    return await service.create_employment(session, storage, payload)


@router.put("/{employment_id}", response_model=EmploymentRead)
async def update_employment(
    employment_id: int,
    payload: EmploymentCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Employment:
    return await service.update_employment(session, employment_id, payload)


@router.post("/{employment_id}/terminate", response_model=EmploymentRead)
async def terminate_employment(
    employment_id: int,
    payload: EmploymentTerminate,
    session: AsyncSession = Depends(get_db_session),
) -> Employment:
    """End an employment that has no vehicle still assigned."""

    return await service.terminate_employment(session, employment_id, payload.end_date)


@router.delete("/{employment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employment(
    employment_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_employment(session, storage, employment_id)
