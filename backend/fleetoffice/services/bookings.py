"""Short-term vehicle bookings and the overlap rules they obey."""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import AssignmentStatus, BookingStatus, VehicleStatus
from ..schemas import BookingBase, BookingCreate, BookingUpdate
from .common import delete_now, get_or_404

logger = logging.getLogger(__name__)

OPEN_ENDED = datetime.combine(date(9999, 12, 31), time.max)
DATETIME_FORMAT = "%d/%m/%Y %H:%M"


def _naive(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    return start < other_end and end > other_start


def assignment_window(assignment: models.Assignment) -> tuple[datetime, datetime]:
    start = datetime.combine(assignment.start_date, assignment.start_time or time.min)
    if assignment.end_date is None:
        return start, OPEN_ENDED
    return start, datetime.combine(assignment.end_date, assignment.end_time or time.max)


async def _conflicts(
    session: AsyncSession,
    vehicle: models.Vehicle,
    start: datetime,
    end: datetime,
    exclude_id: int | None,
) -> list[str]:
    errors = []
    if vehicle.status != VehicleStatus.IN_SERVICE:
        errors.append(f"Vehicle {vehicle.plate} is not available for booking (status: {vehicle.status.label})")

    assignments = await session.execute(
        select(models.Assignment).where(
            models.Assignment.vehicle_id == vehicle.id,
            models.Assignment.status == AssignmentStatus.ASSIGNED,
        )
    )
    for assignment in assignments.scalars().all():
        assigned_from, assigned_to = assignment_window(assignment)
        if overlaps(start, end, assigned_from, assigned_to):
            errors.append(
                f"Vehicle is assigned from {assigned_from:{DATETIME_FORMAT}} to {assigned_to:{DATETIME_FORMAT}}"
            )
            break

    stmt = select(models.VehicleBooking).where(
        models.VehicleBooking.vehicle_id == vehicle.id,
        models.VehicleBooking.status != BookingStatus.CANCELLED,
    )
    if exclude_id is not None:
        stmt = stmt.where(models.VehicleBooking.id != exclude_id)
    bookings = await session.execute(stmt.order_by(models.VehicleBooking.start_at))
    for booking in bookings.scalars().all():
        if overlaps(start, end, booking.start_at, booking.end_at):
            errors.append(
                f"Conflicts with another booking from {booking.start_at:{DATETIME_FORMAT}}"
                f" to {booking.end_at:{DATETIME_FORMAT}}"
            )
            break
    return errors


async def _validate(
    session: AsyncSession, vehicle: models.Vehicle, payload: BookingBase, exclude_id: int | None = None
) -> tuple[datetime, datetime]:
    start, end = _naive(payload.start_at), _naive(payload.end_at)
    if end <= start:
        raise BusinessValidationError("Invalid booking", ["End must be after start"])
    errors = await _conflicts(session, vehicle, start, end, exclude_id)
    if errors:
        logger.warning("Booking on vehicle %s rejected: %s", vehicle.plate, "; ".join(errors))
        raise BusinessValidationError("Invalid booking", errors)
    return start, end


async def list_bookings(
    session: AsyncSession, vehicle_id: int, date_from: date | None = None, date_to: date | None = None
) -> list[models.VehicleBooking]:
    """Bookings of a vehicle touching the ``date_from``..``date_to`` range, by start."""

    await get_or_404(session, models.Vehicle, vehicle_id, "Vehicle")
    stmt = select(models.VehicleBooking).where(models.VehicleBooking.vehicle_id == vehicle_id)
    if date_from is not None:
        stmt = stmt.where(models.VehicleBooking.end_at >= datetime.combine(date_from, time.min))
    if date_to is not None:
        stmt = stmt.where(models.VehicleBooking.start_at <= datetime.combine(date_to, time.max))
    result = await session.execute(stmt.order_by(models.VehicleBooking.start_at))
    return list(result.scalars().all())


async def get_booking(session: AsyncSession, booking_id: int) -> models.VehicleBooking:
    return await get_or_404(session, models.VehicleBooking, booking_id, "Booking")


async def create_booking(session: AsyncSession, payload: BookingCreate) -> models.VehicleBooking:
    vehicle = await get_or_404(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    start, end = await _validate(session, vehicle, payload)
    booking = models.VehicleBooking(**payload.model_dump(exclude={"start_at", "end_at", "status"}))
    booking.start_at, booking.end_at = start, end
    booking.status = payload.status or BookingStatus.PLANNED
    session.add(booking)
    await session.commit()
    logger.info("Booked vehicle %s from %s to %s", vehicle.plate, start, end)
    return booking


async def update_booking(session: AsyncSession, booking_id: int, payload: BookingUpdate) -> models.VehicleBooking:
    booking = await get_booking(session, booking_id)
    vehicle = await get_or_404(session, models.Vehicle, booking.vehicle_id, "Vehicle")
    start, end = await _validate(session, vehicle, payload, exclude_id=booking_id)
    for key, value in payload.model_dump(exclude={"start_at", "end_at", "status"}).items():
        setattr(booking, key, value)
    booking.start_at, booking.end_at = start, end
    if payload.status is not None:
        booking.status = payload.status
    await session.commit()
    return booking


async def delete_booking(session: AsyncSession, booking_id: int) -> None:
    booking = await get_booking(session, booking_id)
    await delete_now(session, booking)
    await session.commit()
    logger.info("Deleted booking %s", booking_id)


def _not_cancelled():
    return models.VehicleBooking.status != BookingStatus.CANCELLED


async def count_active(session: AsyncSession, now: datetime | None = None) -> int:
    """Bookings not cancelled and not yet over."""

    now = now or datetime.now()
    stmt = select(func.count()).select_from(models.VehicleBooking).where(
        _not_cancelled(), models.VehicleBooking.end_at >= now
    )
    return await session.scalar(stmt) or 0


async def count_for_date(session: AsyncSession, day: date) -> int:
    stmt = select(func.count()).select_from(models.VehicleBooking).where(
        _not_cancelled(),
        models.VehicleBooking.start_at <= datetime.combine(day, time.max),
        models.VehicleBooking.end_at >= datetime.combine(day, time.min),
    )
    return await session.scalar(stmt) or 0


async def count_upcoming(session: AsyncSession, days: int, now: datetime | None = None) -> int:
    """Bookings starting within the next ``days`` days."""

    now = now or datetime.now()
    stmt = select(func.count()).select_from(models.VehicleBooking).where(
        _not_cancelled(),
        models.VehicleBooking.start_at.between(now, now + timedelta(days=days)),
    )
    return await session.scalar(stmt) or 0


async def stats(session: AsyncSession, days: int) -> dict:
    return {
        "active": await count_active(session),
        "today": await count_for_date(session, date.today()),
        "upcoming": await count_upcoming(session, days),
    }
