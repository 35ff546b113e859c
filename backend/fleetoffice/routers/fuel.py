"""Fuel card and refuel endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session
from ..models import FuelCard, Refuel
from ..schemas import FuelCardCreate, FuelCardRead, RefuelCreate, RefuelRead
from ..services import fuel as service

cards_router = APIRouter(prefix="/fleet/fuel-cards", tags=["fuel"])
refuels_router = APIRouter(prefix="/fleet/refuels", tags=["fuel"])


@cards_router.get("/", response_model=list[FuelCardRead])
async def list_cards(session: AsyncSession = Depends(get_db_session)) -> Sequence[FuelCard]:
    return await service.list_cards(session)


@cards_router.get("/{card_id}", response_model=FuelCardRead)
async def get_card(card_id: int, session: AsyncSession = Depends(get_db_session)) -> FuelCard:
    return await service.get_card(session, card_id)


@cards_router.post("/", response_model=FuelCardRead, status_code=status.HTTP_201_CREATED)
async def create_card(payload: FuelCardCreate, session: AsyncSession = Depends(get_db_session)) -> FuelCard:
    """Register a card; a vehicle or employee may hold one active card."""

    return await service.create_card(session, payload)


@cards_router.put("/{card_id}", response_model=FuelCardRead)
async def update_card(
    card_id: int,
    payload: FuelCardCreate,
    session: AsyncSession = Depends(get_db_session),
) -> FuelCard:
    return await service.update_card(session, card_id, payload)


@cards_router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: int, session: AsyncSession = Depends(get_db_session)) -> None:
    await service.delete_card(session, card_id)


@refuels_router.get("/", response_model=list[RefuelRead])
async def list_refuels(
    vehicle_id: int | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Refuel]:
    return await service.list_refuels(session, vehicle_id)


@refuels_router.post("/", response_model=RefuelRead, status_code=status.HTTP_201_CREATED)
async def create_refuel(payload: RefuelCreate, session: AsyncSession = Depends(get_db_session)) -> Refuel:
    """Record a refuel and advance the vehicle's mileage."""

    return await service.create_refuel(session, payload)


@refuels_router.delete("/{refuel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_refuel(refuel_id: int, session: AsyncSession = Depends(get_db_session)) -> None:
    await service.delete_refuel(session, refuel_id)
