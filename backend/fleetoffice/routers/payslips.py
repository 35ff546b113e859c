"""Payslip upload and retrieval endpoints."""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db_session, get_storage
from ..schemas import BulkDelete, BulkDeleteResult, PayslipRead, PayslipUploadResult
from ..services import payslips as service
from ..storage import FileStorage

router = APIRouter(prefix="/hr/payslips", tags=["payslips"])


@router.post("/upload", response_model=PayslipUploadResult)
async def upload_payslips(
    month: str = Form(...),
    files: list[UploadFile] = File(...),
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> dict:
    """Store a month's payslips, matching each file name to a fiscal code."""

    uploads = [(upload.filename, upload.content_type, await upload.read()) for upload in files]
    return await service.upload_payslips(session, storage, month, uploads)


@router.get("/", response_model=list[PayslipRead])
async def list_payslips(month: str, session: AsyncSession = Depends(get_db_session)) -> list[dict]:
    return await service.list_payslips(session, month)


@router.get("/months")
async def available_months(session: AsyncSession = Depends(get_db_session)) -> list[str]:
    return await service.available_months(session)


@router.get("/{payslip_id}/download")
async def download_payslip(
    payslip_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> FileResponse:
    payslip, path = await service.payslip_file(session, storage, payslip_id)
    return FileResponse(path, filename=payslip.original_filename)


@router.post("/bulk-delete", response_model=BulkDeleteResult)
async def bulk_delete(
    payload: BulkDelete,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> BulkDeleteResult:
    return BulkDeleteResult(deleted=await service.delete_payslips(session, storage, payload.ids))


@router.delete("/{payslip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payslip(
    payslip_id: int,
    session: AsyncSession = Depends(get_db_session),
    storage: FileStorage = Depends(get_storage),
) -> None:
    await service.delete_payslip(session, storage, payslip_id)
