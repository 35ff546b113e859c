"""Vehicle assignment endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Assignment
from ..models.enums import AssignmentStatus
from ..schemas import AssignmentCreate, AssignmentRead
from ..services import assignments as service
from ..storage import FileStorage

router = APIRouter(prefix="/fleet/assignments", tags=["assignments"])


@router.get("/", response_model=list[AssignmentRead])
async def list_assignments(
    status: AssignmentStatus | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Assignment]:
    return await service.list_assignments(session, status)


@router.post("/release-expired")
async def release_expired(session: AsyncSession = Depends(get_db_session)) -> dict[str, int]:
    """Mark assignments past their end date as returned."""

    return {"released": await service.release_expired(session)}


@router.get("/{assignment_id}", response_model=AssignmentRead)
async def get_assignment(assignment_id: int, session: AsyncSession = Depends(get_db_session)) -> Assignment:
    return await service.get_assignment(session, assignment_id)


@router.post("/", response_model=AssignmentRead, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    payload: AssignmentCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Assignment:
    """Hand a vehicle to an active employment."""

    return await service.create_assignment(session, storage, payload)


@router.put("/{assignment_id}", response_model=AssignmentRead)
async def update_assignment(
    assignment_id: int,
    payload: AssignmentCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Assignment:
    return await service.update_assignment(session, assignment_id, payload)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    assignment_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_assignment(session, storage, assignment_id)
