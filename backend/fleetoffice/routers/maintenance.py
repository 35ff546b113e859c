"""Maintenance records, task types and scheduled vehicle tasks."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Maintenance, TaskType, VehicleTask
from ..schemas import (
    AutoTaskSelection,
    MaintenanceCreate,
    MaintenanceRead,
    MaintenanceStats,
    TaskTypeCreate,
    TaskTypeRead,
    VehicleTaskCreate,
    VehicleTaskRead,
)
from ..services import maintenance as service
from ..storage import FileStorage

router = APIRouter(prefix="/fleet/maintenance", tags=["maintenance"])
task_types_router = APIRouter(prefix="/settings/task-types", tags=["maintenance"])
tasks_router = APIRouter(prefix="/fleet/vehicle-tasks", tags=["maintenance"])


@router.get("/", response_model=list[MaintenanceRead])
async def list_maintenance(
    plate: str | None = None,
    year: int | None = None,
    task_type_id: int | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Maintenance]:
    return await service.list_maintenance(session, plate, year, task_type_id)


@router.get("/stats/{year}", response_model=MaintenanceStats)
async def yearly_stats(year: int, session: AsyncSession = Depends(get_db_session)) -> dict:
    """Count, total and average cost of a year's maintenance."""

    return await service.yearly_stats(session, year)


@router.get("/{maintenance_id}", response_model=MaintenanceRead)
async def get_maintenance(maintenance_id: int, session: AsyncSession = Depends(get_db_session)) -> Maintenance:
    return await service.get_maintenance(session, maintenance_id)


@router.post("/", response_model=MaintenanceRead, status_code=status.HTTP_201_CREATED)
async def create_maintenance(payload: MaintenanceCreate, session: AsyncSession = Depends(get_db_session)) -> Maintenance:
    """Record work on a vehicle and schedule the next task of its type."""

    return await service.create_maintenance(session, payload)


@router.put("/{maintenance_id}", response_model=MaintenanceRead)
async def update_maintenance(
    maintenance_id: int,
    payload: MaintenanceCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Maintenance:
    return await service.update_maintenance(session, maintenance_id, payload)


@router.delete("/{maintenance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance(
    maintenance_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_maintenance(session, storage, maintenance_id)


@task_types_router.get("/", response_model=list[TaskTypeRead])
async def list_task_types(session: AsyncSession = Depends(get_db_session)) -> Sequence[TaskType]:
    return await service.list_task_types(session)


@task_types_router.post("/", response_model=TaskTypeRead, status_code=status.HTTP_201_CREATED)
async def create_task_type(payload: TaskTypeCreate, session: AsyncSession = Depends(get_db_session)) -> TaskType:
    return await service.create_task_type(session, payload)


@task_types_router.post("/seed")
async def seed_task_types(session: AsyncSession = Depends(get_db_session)) -> dict[str, int]:
    """Create the default task types that are missing."""

    return {"created": await service.seed_task_types(session)}


@tasks_router.get("/", response_model=list[VehicleTaskRead])
async def list_tasks(
    vehicle_id: int | None = None,
    open_only: bool = False,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[VehicleTask]:
    return await service.list_tasks(session, vehicle_id, open_only)


@tasks_router.post("/", response_model=VehicleTaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(payload: VehicleTaskCreate, session: AsyncSession = Depends(get_db_session)) -> VehicleTask:
    return await service.create_task(session, payload)


@tasks_router.post("/{task_id}/close", response_model=VehicleTaskRead)
async def close_task(task_id: int, session: AsyncSession = Depends(get_db_session)) -> VehicleTask:
    return await service.close_task(session, task_id)


@tasks_router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, session: AsyncSession = Depends(get_db_session)) -> None:
    await service.delete_task(session, task_id)


@tasks_router.post("/ensure/{vehicle_id}", response_model=list[VehicleTaskRead])
async def ensure_tasks(vehicle_id: int, session: AsyncSession = Depends(get_db_session)) -> Sequence[VehicleTask]:
    """Open any missing automatic task for a vehicle and return its open tasks."""

    return await service.ensure_vehicle_tasks(session, vehicle_id)


@tasks_router.put("/auto/{vehicle_id}", response_model=list[VehicleTaskRead])
async def update_auto_tasks(
    vehicle_id: int,
    payload: AutoTaskSelection,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[VehicleTask]:
    return await service.update_auto_tasks(session, vehicle_id, payload)
