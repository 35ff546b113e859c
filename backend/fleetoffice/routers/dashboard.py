"""Home dashboard endpoint."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..dependencies import get_db_session
from ..schemas import Dashboard
from ..services import dashboard as service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=Dashboard)
async def dashboard(
    months: int = Query(default=6, ge=1, le=24),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> Dashboard:
    """Fleet, expense and compliance figures for the home page."""

    return await service.build_dashboard(session, months, settings.expiry_warning_days)
