"""Vehicle endpoints, including the vehicle photo."""
from typing import Sequence

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Assignment, Vehicle
from ..models.enums import VehicleStatus
from ..schemas import AssignmentRead, VehicleCreate, VehicleRead
from ..services import assignments as assignment_service
from ..services import vehicles as service
from ..storage import FileStorage

router = APIRouter(prefix="/fleet/vehicles", tags=["vehicles"])


@router.get("/", response_model=list[VehicleRead])
async def list_vehicles(
    keyword: str | None = None,
    status: VehicleStatus | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Vehicle]:
    """Search vehicles by plate, brand or model."""

    return await service.list_vehicles(session, keyword, status)


@router.get("/available", response_model=list[VehicleRead])
async def available_vehicles(session: AsyncSession = Depends(get_db_session)) -> Sequence[Vehicle]:
    return await service.available_vehicles(session)


@router.get("/without-fuel-card", response_model=list[VehicleRead])
async def vehicles_without_fuel_card(session: AsyncSession = Depends(get_db_session)) -> Sequence[Vehicle]:
    return await service.vehicles_without_fuel_card(session)


@router.get("/{vehicle_id}", response_model=VehicleRead)
async def get_vehicle(vehicle_id: int, session: AsyncSession = Depends(get_db_session)) -> Vehicle:
    return await service.get_vehicle(session, vehicle_id)


@router.get("/{vehicle_id}/assignments", response_model=list[AssignmentRead])
async def vehicle_assignments(vehicle_id: int, session: AsyncSession = Depends(get_db_session)) -> Sequence[Assignment]:
    """Assignment history of a vehicle, newest first."""

    await service.get_vehicle(session, vehicle_id)
    return await assignment_service.assignments_of_vehicle(session, vehicle_id)


@router.post("/", response_model=VehicleRead, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    payload: VehicleCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Vehicle:
    return await service.create_vehicle(session, storage, payload)


@router.put("/{vehicle_id}", response_model=VehicleRead)
async def update_vehicle(
    vehicle_id: int,
    payload: VehicleCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Vehicle:
    return await service.update_vehicle(session, vehicle_id, payload)


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_vehicle(session, storage, vehicle_id)


@router.post("/{vehicle_id}/photo", response_model=VehicleRead)
async def upload_photo(
    vehicle_id: int,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Vehicle:
    """Replace the vehicle image."""

    data = await file.read()
    return await service.store_photo(session, storage, vehicle_id, file.filename, file.content_type, data)


@router.get("/{vehicle_id}/photo")
async def get_photo(
    vehicle_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> FileResponse:
    path = await service.photo_path(session, storage, vehicle_id)
    return FileResponse(path)
