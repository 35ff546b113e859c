"""Vehicle booking endpoints."""
from datetime import date
from typing import Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session
from ..models import VehicleBooking
from ..schemas import BookingCreate, BookingRead, BookingStats, BookingUpdate
from ..services import bookings as service

router = APIRouter(prefix="/fleet/vehicle-bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
async def list_bookings(
    vehicle_id: int,
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[VehicleBooking]:
    """Bookings of a vehicle, optionally limited to a date range."""

    return await service.list_bookings(session, vehicle_id, date_from, date_to)


@router.get("/stats", response_model=BookingStats)
async def booking_stats(
    days: int = Query(default=7, ge=0),
    session: AsyncSession = Depends(get_db_session),
) -> dict:
    """Active bookings, bookings touching today and those starting within ``days``."""

    return await service.stats(session, days)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(booking_id: int, session: AsyncSession = Depends(get_db_session)) -> VehicleBooking:
    return await service.get_booking(session, booking_id)


@router.post("/", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(payload: BookingCreate, session: AsyncSession = Depends(get_db_session)) -> VehicleBooking:
    return await service.create_booking(session, payload)


@router.put("/{booking_id}", response_model=BookingRead)
async def update_booking(
    booking_id: int,
    payload: BookingUpdate,
    session: AsyncSession = Depends(get_db_session),
) -> VehicleBooking:
    return await service.update_booking(session, booking_id, payload)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(booking_id: int, session: AsyncSession = Depends(get_db_session)) -> None:
    await service.delete_booking(session, booking_id)
