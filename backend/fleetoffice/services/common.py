"""Lookup and validation helpers shared by the services."""
from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import DuplicateError, NotFoundError
from ..validators import is_valid_postal_code

ModelT = TypeVar("ModelT")


async def get_or_404(session: AsyncSession, model: type[ModelT], entity_id: int, label: str | None = None) -> ModelT:
    """Load a row by primary key or raise ``NotFoundError``."""

    entity = await session.get(model, entity_id)
    if entity is None:
        raise NotFoundError(label or model.__name__, entity_id)
    return entity


async def ensure_exists(session: AsyncSession, model: type, entity_id: int | None, label: str | None = None) -> None:
    """Check an optional reference; ``None`` is accepted."""

    if entity_id is not None:
        await get_or_404(session, model, entity_id, label)


async def ensure_unique(
    session: AsyncSession,
    model: type,
    field: str,
    value: Any,
    exclude_id: int | None = None,
    label: str | None = None,
) -> None:
    """Raise ``DuplicateError`` when another row already holds ``value``."""

    if value is None:
        return
    column = getattr(model, field)
    stmt = select(func.count()).select_from(model).where(column == value)
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    if (await session.scalar(stmt)) or 0:
        raise DuplicateError(label or model.__name__, field, value)


def address_errors(payload: Any) -> list[str]:
    if not is_valid_postal_code(getattr(payload, "country_code", None), getattr(payload, "postal_code", None)):
        return ["Italian postal code must be five digits"]
    return []


def apply(entity: Any, values: dict[str, Any]) -> Any:
    """Copy payload values onto an ORM entity."""

    for key, value in values.items():
        setattr(entity, key, value)
    return entity


def like(keyword: str) -> str:
    return f"%{keyword.strip().lower()}%"


async def delete_now(session: AsyncSession, entity: Any) -> None:
    """Delete and flush at once so dependants go before the rows they reference."""

    await session.delete(entity)
    await session.flush()
