"""Fuel cards and refuels."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..schemas import FuelCardCreate, RefuelCreate
from .common import apply, delete_now, ensure_exists, ensure_unique, get_or_404

logger = logging.getLogger(__name__)

MAX_REFUEL_LITRES = 200


def is_card_active(expiry_date: date | None, today: date | None = None) -> bool:
    today = today or date.today()
    return expiry_date is None or expiry_date >= today


async def list_cards(session: AsyncSession) -> list[models.FuelCard]:
    result = await session.execute(select(models.FuelCard).order_by(models.FuelCard.card_number))
    return list(result.scalars().all())


async def get_card(session: AsyncSession, card_id: int) -> models.FuelCard:
    return await get_or_404(session, models.FuelCard, card_id, "Fuel card")


async def _other_active_card(session: AsyncSession, column, value: int | None, card_id: int | None) -> bool:
    if value is None:
        return False
    today = date.today()
    stmt = (
        select(func.count())
        .select_from(models.FuelCard)
        .where(
            column == value,
            or_(models.FuelCard.expiry_date.is_(None), models.FuelCard.expiry_date >= today),
        )
    )
    if card_id is not None:
        stmt = stmt.where(models.FuelCard.id != card_id)
    return bool(await session.scalar(stmt))


async def _prepare(session: AsyncSession, payload: FuelCardCreate, card_id: int | None = None) -> dict:
    values = payload.model_dump()
    values["card_number"] = values["card_number"].strip()
    await ensure_exists(session, models.Supplier, payload.supplier_id, "Supplier")
    await ensure_exists(session, models.Employee, payload.employee_id, "Employee")
    await ensure_exists(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    await ensure_unique(session, models.FuelCard, "card_number", values["card_number"], card_id, "Fuel card")

    values["active"] = is_card_active(payload.expiry_date)
    if values["active"]:
        errors = []
        if await _other_active_card(session, models.FuelCard.vehicle_id, payload.vehicle_id, card_id):
            errors.append("Vehicle already has an active fuel card")
        if await _other_active_card(session, models.FuelCard.employee_id, payload.employee_id, card_id):
            errors.append("Employee already has an active fuel card")
        if errors:
            logger.warning("Fuel card %s rejected: %s", values["card_number"], "; ".join(errors))
            raise BusinessValidationError("Fuel card not allowed", errors)
    return values


async def create_card(session: AsyncSession, payload: FuelCardCreate) -> models.FuelCard:
    card = models.FuelCard(**await _prepare(session, payload))
    session.add(card)
    await session.commit()
    logger.info("Created fuel card %s", card.card_number)
    return card


async def update_card(session: AsyncSession, card_id: int, payload: FuelCardCreate) -> models.FuelCard:
    card = await get_card(session, card_id)
    apply(card, await _prepare(session, payload, card_id))
    await session.commit()
    return card


async def delete_card(session: AsyncSession, card_id: int) -> None:
    card = await get_card(session, card_id)
    card.vehicle_id = None
    card.employee_id = None
    await delete_now(session, card)
    await session.commit()
    logger.info("Deleted fuel card %s", card_id)


async def list_refuels(session: AsyncSession, vehicle_id: int | None = None) -> list[models.Refuel]:
    stmt = select(models.Refuel)
    if vehicle_id is not None:
        stmt = stmt.where(models.Refuel.vehicle_id == vehicle_id)
    result = await session.execute(stmt.order_by(models.Refuel.refuel_date.desc(), models.Refuel.id.desc()))
    return list(result.scalars().all())


async def last_mileage(session: AsyncSession, vehicle_id: int) -> int | None:
    return await session.scalar(select(func.max(models.Refuel.mileage)).where(models.Refuel.vehicle_id == vehicle_id))


async def create_refuel(session: AsyncSession, payload: RefuelCreate) -> models.Refuel:
    """Record a refuel; mileage must keep growing for the vehicle."""

    vehicle = await get_or_404(session, models.Vehicle, payload.vehicle_id, "Vehicle")
    await ensure_exists(session, models.FuelCard, payload.fuel_card_id, "Fuel card")
    await ensure_exists(session, models.Employee, payload.employee_id, "Employee")

    errors = []
    previous = await last_mileage(session, vehicle.id)
    mileage = payload.mileage
    if mileage is None:
        mileage = previous if previous is not None else vehicle.current_mileage or 0
    elif previous is not None and mileage <= previous:
        errors.append(f"Mileage must be greater than the last recorded ({previous} km)")
    if payload.quantity > MAX_REFUEL_LITRES:
        errors.append(f"Quantity cannot exceed {MAX_REFUEL_LITRES} litres")
    if payload.refuel_date > date.today():
        errors.append("Refuel date cannot be in the future")
    if errors:
        logger.warning("Refuel for vehicle %s rejected: %s", vehicle.plate, "; ".join(errors))
        raise BusinessValidationError("Invalid refuel", errors)

    refuel = models.Refuel(**payload.model_dump(exclude={"mileage"}), mileage=mileage)
    session.add(refuel)
    if mileage > (vehicle.current_mileage or 0):
        vehicle.current_mileage = mileage
    await session.commit()
    return refuel


async def delete_refuel(session: AsyncSession, refuel_id: int) -> None:
    refuel = await get_or_404(session, models.Refuel, refuel_id, "Refuel")
    await delete_now(session, refuel)
    await session.commit()
