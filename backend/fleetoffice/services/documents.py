"""
Document attachments.

Every record type that accepts uploads keeps its files in its own directory
under the storage root; the ``documents`` table holds the metadata.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..exceptions import BusinessValidationError
from ..models.enums import DocumentType, OwnerType
from ..schemas import DocumentStatistics
from ..storage import FileStorage, base_name
from .common import get_or_404

logger = logging.getLogger(__name__)

OWNER_MODELS: dict[OwnerType, type] = {
    OwnerType.EMPLOYEE: models.Employee,
    OwnerType.EMPLOYMENT: models.Employment,
    OwnerType.VEHICLE: models.Vehicle,
    OwnerType.MAINTENANCE: models.Maintenance,
    OwnerType.ASSIGNMENT: models.Assignment,
    OwnerType.PROJECT: models.Project,
    OwnerType.INSURANCE: models.Insurance,
    OwnerType.CONTRACT: models.Contract,
    OwnerType.SUPPLIER: models.Supplier,
    OwnerType.CORRESPONDENCE: models.Correspondence,
    OwnerType.COMPLIANCE_ITEM: models.ComplianceItem,
    OwnerType.EXPENSE_ITEM: models.ExpenseItem,
}

_ROOT_DIRS = {
    OwnerType.EMPLOYEE: "employees",
    OwnerType.VEHICLE: "vehicles",
    OwnerType.ASSIGNMENT: "assignments",
    OwnerType.PROJECT: "projects",
    OwnerType.CONTRACT: "contracts",
    OwnerType.SUPPLIER: "suppliers",
    OwnerType.CORRESPONDENCE: "correspondence",
    OwnerType.COMPLIANCE_ITEM: "compliance_items",
    OwnerType.EXPENSE_ITEM: "expense_items",
}


def owner_directory(owner_type: OwnerType, owner: Any) -> str:
    """Storage sub-directory, relative to the root, holding an owner's files."""

    if owner_type is OwnerType.EMPLOYMENT:
        return f"employments/{owner.matricola}/docs"
    if owner_type is OwnerType.MAINTENANCE:
        return f"vehicles/{owner.vehicle_id}/docs"
    if owner_type is OwnerType.INSURANCE:
        if owner.project_id is not None:
            return f"projects/{owner.project_id}/policies/{owner.id}"
        return f"policies/{owner.id}"
    return f"{_ROOT_DIRS[owner_type]}/{owner.id}/docs"


async def get_owner(session: AsyncSession, owner_type: OwnerType, owner_id: int) -> Any:
    return await get_or_404(session, OWNER_MODELS[owner_type], owner_id, owner_type.label)


def init_owner_directory(storage: FileStorage, owner_type: OwnerType, owner: Any) -> None:
    storage.init_directory(owner_directory(owner_type, owner))


async def upload_document(
    session: AsyncSession,
    storage: FileStorage,
    owner_type: OwnerType,
    owner_id: int,
    filename: str | None,
    content_type: str | None,
    data: bytes,
    document_type: DocumentType,
    issue_date: date | None = None,
    expiry_date: date | None = None,
) -> models.Document:
    """Validate and store a file, then record it for its owner."""

    owner = await get_owner(session, owner_type, owner_id)
    if issue_date and expiry_date and expiry_date < issue_date:
        raise BusinessValidationError("Expiry date must not precede issue date")

    relative_path = storage.store(
        owner_directory(owner_type, owner),
        filename,
        data,
        content_type,
        image=document_type.is_photo,
    )
    document = models.Document(
        owner_type=owner_type,
        owner_id=owner_id,
        document_type=document_type,
        path=relative_path,
        original_filename=base_name(filename),
        content_type=content_type,
        size=len(data),
        issue_date=issue_date,
        expiry_date=expiry_date,
    )
    session.add(document)
    await session.commit()
    logger.info("Uploaded %s document %s for %s %s", document_type.value, document.id, owner_type.value, owner_id)
    return document


async def list_documents(session: AsyncSession, owner_type: OwnerType, owner_id: int) -> list[models.Document]:
    await get_owner(session, owner_type, owner_id)
    result = await session.execute(
        select(models.Document)
        .where(models.Document.owner_type == owner_type, models.Document.owner_id == owner_id)
        .order_by(models.Document.uploaded_at.desc(), models.Document.id.desc())
    )
    return list(result.scalars().all())


async def resolve_document(session: AsyncSession, storage: FileStorage, document_id: int) -> tuple[models.Document, Path]:
    document = await get_or_404(session, models.Document, document_id, "Document")
    return document, storage.resolve(document.path)


async def resolve_owner_file(
    session: AsyncSession,
    storage: FileStorage,
    owner_type: OwnerType,
    owner_id: int,
    filename: str,
) -> Path:
    """Find a stored file by name inside its owner's directory."""

    owner = await get_owner(session, owner_type, owner_id)
    return storage.resolve_in(owner_directory(owner_type, owner), filename)


async def delete_document(session: AsyncSession, storage: FileStorage, document_id: int) -> None:
    document = await get_or_404(session, models.Document, document_id, "Document")
    path = document.path
    await session.delete(document)
    await session.commit()
    storage.delete(path)
    logger.info("Deleted document %s", document_id)


async def purge_owner_documents(
    session: AsyncSession,
    storage: FileStorage,
    owner_type: OwnerType,
    owner: Any,
) -> None:
    """Remove an owner's document rows and files; the caller commits."""

    result = await session.execute(
        select(models.Document.path).where(
            models.Document.owner_type == owner_type, models.Document.owner_id == owner.id
        )
    )
    paths = list(result.scalars().all())
    await session.execute(
        delete(models.Document).where(
            models.Document.owner_type == owner_type, models.Document.owner_id == owner.id
        )
    )
    for path in paths:
        storage.delete(path)
    # maintenance files live in the vehicle directory
    if owner_type is not OwnerType.MAINTENANCE:
        storage.delete_directory(owner_directory(owner_type, owner))


def expiry_statistics(expiry_dates: Iterable[date | None], warning_days: int, today: date | None = None) -> DocumentStatistics:
    """Bucket expiry dates into expired / expiring soon / valid / no expiry."""

    today = today or date.today()
    horizon = today + timedelta(days=warning_days)
    stats = DocumentStatistics()
    for expiry in expiry_dates:
        stats.total += 1
        if expiry is None:
            stats.no_expiry += 1
        elif expiry < today:
            stats.expired += 1
        elif expiry <= horizon:
            stats.expiring_soon += 1
        else:
            stats.valid += 1
    if stats.total:
        stats.expired_percentage = round(stats.expired * 100 / stats.total, 1)
        stats.expiring_soon_percentage = round(stats.expiring_soon * 100 / stats.total, 1)
        stats.valid_percentage = round(stats.valid * 100 / stats.total, 1)
        stats.no_expiry_percentage = round(stats.no_expiry * 100 / stats.total, 1)
    stats.urgent = stats.expired + stats.expiring_soon
    return stats


async def document_statistics(session: AsyncSession, warning_days: int) -> DocumentStatistics:
    result = await session.execute(select(models.Document.expiry_date))
    return expiry_statistics(result.scalars().all(), warning_days)


async def expiring_documents(session: AsyncSession, days: int) -> list[models.Document]:
    today = date.today()
    result = await session.execute(
        select(models.Document)
        .where(
            models.Document.expiry_date.is_not(None),
            models.Document.expiry_date >= today,
            models.Document.expiry_date <= today + timedelta(days=days),
        )
        .order_by(models.Document.expiry_date)
    )
    return list(result.scalars().all())


async def expired_documents(session: AsyncSession) -> list[models.Document]:
    result = await session.execute(
        select(models.Document)
        .where(models.Document.expiry_date < date.today())
        .order_by(models.Document.expiry_date)
    )
    return list(result.scalars().all())

