"""Protocol register of incoming and outgoing correspondence."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import DuplicateError
from ..models.enums import CorrespondenceType, OwnerType
from ..models.registry import format_protocol
from ..schemas import CorrespondenceCreate
from ..storage import FileStorage
from .common import delete_now, get_or_404, like
from .documents import init_owner_directory, purge_owner_documents

logger = logging.getLogger(__name__)

NO_PROTOCOL = "--"


async def next_progressive(session: AsyncSession, year: int, direction: CorrespondenceType) -> int:
    current = await session.scalar(
        select(func.max(models.Correspondence.progressive)).where(
            models.Correspondence.year == year, models.Correspondence.direction == direction
        )
    )
    return (current or 0) + 1


async def _ensure_free(
    session: AsyncSession, year: int, direction: CorrespondenceType, progressive: int, exclude_id: int | None = None
) -> None:
    stmt = select(func.count()).select_from(models.Correspondence).where(
        models.Correspondence.year == year,
        models.Correspondence.direction == direction,
        models.Correspondence.progressive == progressive,
    )
    if exclude_id is not None:
        stmt = stmt.where(models.Correspondence.id != exclude_id)
    if await session.scalar(stmt):
        raise DuplicateError("Correspondence", "protocol", format_protocol(progressive, year))


async def register(session: AsyncSession, storage: FileStorage, payload: CorrespondenceCreate) -> models.Correspondence:
    """Record a letter; a zero or missing progressive takes the next free number."""

    year = payload.year or date.today().year
    values = payload.model_dump()
    values["year"] = year
    if not payload.progressive:
        values["progressive"] = await next_progressive(session, year, payload.direction)
    else:
        await _ensure_free(session, year, payload.direction, payload.progressive)
    entry = models.Correspondence(**values)
    session.add(entry)
    await session.commit()
    init_owner_directory(storage, OwnerType.CORRESPONDENCE, entry)
    logger.info("Registered %s protocol %s", entry.direction.value, entry.protocol)
    return entry


async def get_entry(session: AsyncSession, entry_id: int) -> models.Correspondence:
    return await get_or_404(session, models.Correspondence, entry_id, "Correspondence")


async def update_entry(session: AsyncSession, entry_id: int, payload: CorrespondenceCreate) -> models.Correspondence:
    entry = await get_entry(session, entry_id)
    year = payload.year or entry.year
    progressive = payload.progressive or entry.progressive
    if (year, payload.direction, progressive) != (entry.year, entry.direction, entry.progressive):
        await _ensure_free(session, year, payload.direction, progressive, entry_id)
    for key, value in payload.model_dump(exclude={"year", "progressive"}).items():
        setattr(entry, key, value)
    entry.year = year
    entry.progressive = progressive
    await session.commit()
    return entry


async def delete_entry(session: AsyncSession, storage: FileStorage, entry_id: int) -> None:
    entry = await get_entry(session, entry_id)
    await purge_owner_documents(session, storage, OwnerType.CORRESPONDENCE, entry)
    await delete_now(session, entry)
    await session.commit()
    logger.info("Deleted correspondence %s", entry_id)


async def search(
    session: AsyncSession,
    year: int | None = None,
    direction: CorrespondenceType | None = None,
    keyword: str | None = None,
) -> list[models.Correspondence]:
    stmt = select(models.Correspondence).where(models.Correspondence.year == (year or date.today().year))
    if direction is not None:
        stmt = stmt.where(models.Correspondence.direction == direction)
    if keyword:
        pattern = like(keyword)
        stmt = stmt.where(
            or_(
                func.lower(models.Correspondence.description).like(pattern),
                func.lower(models.Correspondence.sender).like(pattern),
                func.lower(models.Correspondence.recipient).like(pattern),
                func.lower(models.Correspondence.notes).like(pattern),
            )
        )
    result = await session.execute(stmt.order_by(models.Correspondence.progressive.desc()))
    return list(result.scalars().all())


async def years(session: AsyncSession) -> list[int]:
    """Years with entries, newest first; the current year is always listed."""

    result = await session.execute(select(models.Correspondence.year).distinct())
    found = set(result.scalars().all())
    found.add(date.today().year)
    return sorted(found, reverse=True)


async def last_protocol(session: AsyncSession, direction: CorrespondenceType) -> str:
    year = date.today().year
    progressive = await session.scalar(
        select(func.max(models.Correspondence.progressive)).where(
            models.Correspondence.year == year, models.Correspondence.direction == direction
        )
    )
    return format_protocol(progressive, year) if progressive else NO_PROTOCOL
