"""Vehicle registry."""
from __future__ import annotations

import logging

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError, NotFoundError
from ..models.enums import OwnerType, VehicleStatus
from ..schemas import VehicleCreate
from ..storage import FileStorage
from ..validators import is_valid_plate, normalize_plate
from .assignments import remove_assignment
from .common import apply, delete_now, ensure_exists, ensure_unique, get_or_404, like
from .documents import init_owner_directory, owner_directory, purge_owner_documents
from .maintenance import ensure_tasks

logger = logging.getLogger(__name__)


async def list_vehicles(
    session: AsyncSession, keyword: str | None = None, status: VehicleStatus | None = None
) -> list[models.Vehicle]:
    stmt = select(models.Vehicle)
    if keyword:
        pattern = like(keyword)
        stmt = stmt.where(
            or_(
                func.lower(models.Vehicle.plate).like(pattern),
                func.lower(models.Vehicle.brand).like(pattern),
                func.lower(models.Vehicle.model).like(pattern),
            )
        )
    if status is not None:
        stmt = stmt.where(models.Vehicle.status == status)
    result = await session.execute(stmt.order_by(models.Vehicle.plate))
    return list(result.scalars().all())


async def get_vehicle(session: AsyncSession, vehicle_id: int) -> models.Vehicle:
    return await get_or_404(session, models.Vehicle, vehicle_id, "Vehicle")


async def _prepare(session: AsyncSession, payload: VehicleCreate, vehicle_id: int | None = None) -> dict:
    values = payload.model_dump()
    values["plate"] = normalize_plate(values["plate"])
    if values.get("chassis_number"):
        values["chassis_number"] = values["chassis_number"].strip().upper()
    if not is_valid_plate(values["plate"]):
        raise BusinessValidationError("Invalid plate", [f"Invalid plate format: {values['plate']}"])
    await ensure_exists(session, models.Supplier, payload.supplier_id, "Supplier")
    await ensure_unique(session, models.Vehicle, "plate", values["plate"], vehicle_id, "Vehicle")
    await ensure_unique(session, models.Vehicle, "chassis_number", values.get("chassis_number"), vehicle_id, "Vehicle")
    return values


async def create_vehicle(session: AsyncSession, storage: FileStorage, payload: VehicleCreate) -> models.Vehicle:
    vehicle = models.Vehicle(**await _prepare(session, payload))
    session.add(vehicle)
    await session.flush()
    await ensure_tasks(session, vehicle)
    await session.commit()
    init_owner_directory(storage, OwnerType.VEHICLE, vehicle)
    logger.info("Created vehicle %s (%s)", vehicle.id, vehicle.plate)
    return vehicle


async def update_vehicle(session: AsyncSession, vehicle_id: int, payload: VehicleCreate) -> models.Vehicle:
    vehicle = await get_vehicle(session, vehicle_id)
    apply(vehicle, await _prepare(session, payload, vehicle_id))
    await ensure_tasks(session, vehicle)
    await session.commit()
    return vehicle


async def delete_vehicle(session: AsyncSession, storage: FileStorage, vehicle_id: int) -> None:
    """Delete a vehicle with its assignments, bookings, maintenance, tasks and refuels."""

    vehicle = await get_vehicle(session, vehicle_id)
    await session.execute(
        update(models.FuelCard).where(models.FuelCard.vehicle_id == vehicle_id).values(vehicle_id=None)
    )
    assignments = await session.execute(
        select(models.Assignment).where(models.Assignment.vehicle_id == vehicle_id)
    )
    for assignment in assignments.scalars().all():
        await remove_assignment(session, storage, assignment)

    maintenance = await session.execute(
        select(models.Maintenance).where(models.Maintenance.vehicle_id == vehicle_id)
    )
    for record in maintenance.scalars().all():
        await purge_owner_documents(session, storage, OwnerType.MAINTENANCE, record)
        await delete_now(session, record)

    await session.execute(delete(models.VehicleTask).where(models.VehicleTask.vehicle_id == vehicle_id))
    await session.execute(delete(models.VehicleBooking).where(models.VehicleBooking.vehicle_id == vehicle_id))
    await session.execute(delete(models.Refuel).where(models.Refuel.vehicle_id == vehicle_id))
    await purge_owner_documents(session, storage, OwnerType.VEHICLE, vehicle)
    await session.delete(vehicle)
    await session.commit()
    logger.info("Deleted vehicle %s", vehicle_id)


async def available_vehicles(session: AsyncSession) -> list[models.Vehicle]:
    return await list_vehicles(session, status=VehicleStatus.IN_SERVICE)


async def vehicles_without_fuel_card(session: AsyncSession) -> list[models.Vehicle]:
    holders = select(models.FuelCard.vehicle_id).where(models.FuelCard.vehicle_id.is_not(None))
    result = await session.execute(
        select(models.Vehicle).where(models.Vehicle.id.not_in(holders)).order_by(models.Vehicle.plate)
    )
    return list(result.scalars().all())


async def store_photo(
    session: AsyncSession,
    storage: FileStorage,
    vehicle_id: int,
    filename: str | None,
    content_type: str | None,
    data: bytes,
) -> models.Vehicle:
    """Replace the vehicle image; photos follow the stricter image rules."""

    vehicle = await get_vehicle(session, vehicle_id)
    previous = vehicle.image_path
    vehicle.image_path = storage.store(
        owner_directory(OwnerType.VEHICLE, vehicle), filename, data, content_type, image=True
    )
    await session.commit()
    if previous:
        storage.delete(previous)
    return vehicle


async def photo_path(session: AsyncSession, storage: FileStorage, vehicle_id: int):
    vehicle = await get_vehicle(session, vehicle_id)
    if not vehicle.image_path:
        raise NotFoundError("Vehicle photo", vehicle_id)
    return storage.resolve(vehicle.image_path)
