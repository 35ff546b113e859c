"""Reusable FastAPI dependencies."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import get_session
from .storage import FileStorage, FileValidator


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an AsyncSession."""
    async for session in get_session():
        yield session


def get_storage() -> FileStorage:
    """File storage rooted at the configured upload directory."""

    settings = get_settings()
    validator = FileValidator(settings.max_upload_size, settings.max_image_size)
    return FileStorage(settings.upload_root, validator)
