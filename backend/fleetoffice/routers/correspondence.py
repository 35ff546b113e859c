"""Correspondence protocol register endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..models import Correspondence
from ..models.enums import CorrespondenceType
from ..schemas import CorrespondenceCreate, CorrespondenceRead, LastProtocols
from ..services import correspondence as service
from ..storage import FileStorage

router = APIRouter(prefix="/settings/correspondence", tags=["correspondence"])


@router.get("/", response_model=list[CorrespondenceRead])
async def search_correspondence(
    year: int | None = None,
    direction: CorrespondenceType | None = None,
    keyword: str | None = None,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Correspondence]:
    """Entries of a year (the current one by default), latest protocol first."""

    return await service.search(session, year, direction, keyword)


@router.get("/years")
async def years(session: AsyncSession = Depends(get_db_session)) -> list[int]:
    return await service.years(session)


@router.get("/last-protocols", response_model=LastProtocols)
async def last_protocols(session: AsyncSession = Depends(get_db_session)) -> LastProtocols:
    return LastProtocols(
        incoming=await service.last_protocol(session, CorrespondenceType.E),
        outgoing=await service.last_protocol(session, CorrespondenceType.U),
    )


@router.get("/{entry_id}", response_model=CorrespondenceRead)
async def get_entry(entry_id: int, session: AsyncSession = Depends(get_db_session)) -> Correspondence:
    return await service.get_entry(session, entry_id)


@router.post("/", response_model=CorrespondenceRead, status_code=status.HTTP_201_CREATED)
async def register(
    payload: CorrespondenceCreate,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Correspondence:
    """Register a letter, numbering it when no progressive is given."""

    return await service.register(session, storage, payload)


@router.put("/{entry_id}", response_model=CorrespondenceRead)
async def update_entry(
    entry_id: int,
    payload: CorrespondenceCreate,
    session: AsyncSession = Depends(get_db_session),
) -> Correspondence:
    return await service.update_entry(session, entry_id, payload)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_entry(session, storage, entry_id)
