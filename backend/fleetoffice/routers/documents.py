"""Document upload, listing and download endpoints."""
from datetime import date
from typing import Sequence

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..dependencies import get_db_session, get_storage
from ..models import Document
from ..models.enums import DocumentType, OwnerType
from ..schemas import DocumentRead, DocumentStatistics
from ..services import documents as service
from ..storage import FileStorage

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("/statistics", response_model=DocumentStatistics)
async def statistics(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> DocumentStatistics:
    """Expired, expiring and valid document counts."""

    return await service.document_statistics(session, settings.expiry_warning_days)


@router.get("/expiring", response_model=list[DocumentRead])
async def expiring(
    days: int = Query(default=30, ge=0),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Document]:
    return await service.expiring_documents(session, days)


@router.get("/expired", response_model=list[DocumentRead])
async def expired(session: AsyncSession = Depends(get_db_session)) -> Sequence[Document]:
    return await service.expired_documents(session)


@router.get("/{document_id}/download")
async def download(
    document_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> FileResponse:
    document, path = await service.resolve_document(session, storage, document_id)
    return FileResponse(path, filename=document.original_filename)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    document_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_document(session, storage, document_id)


@router.post("/{owner_type}/{owner_id}", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
async def upload(
    owner_type: OwnerType,
    owner_id: int,
    file: UploadFile = File(...),
    document_type: DocumentType = Form(...),
    issue_date: date | None = Form(None),
    expiry_date: date | None = Form(None),
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> Document:
    """Attach a file to any document owner."""

    data = await file.read()
    return await service.upload_document(
        session,
        storage,
        owner_type,
        owner_id,
        file.filename,
        file.content_type,
        data,
        document_type,
        issue_date,
        expiry_date,
    )


@router.get("/{owner_type}/{owner_id}", response_model=list[DocumentRead])
async def list_for_owner(
    owner_type: OwnerType,
    owner_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Document]:
    return await service.list_documents(session, owner_type, owner_id)


@router.get("/{owner_type}/{owner_id}/files/{filename}")
async def download_by_name(
    owner_type: OwnerType,
    owner_id: int,
    filename: str,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> FileResponse:
    """Serve a stored file by name; names escaping the owner directory are rejected."""

    path = await service.resolve_owner_file(session, storage, owner_type, owner_id, filename)
    return FileResponse(path, filename=path.name)
