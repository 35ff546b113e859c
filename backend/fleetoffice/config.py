"""Application settings and configuration helpers."""
from functools import lru_cache
import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    database_url: str = Field(
        default="sqlite+aiosqlite:///./fleetoffice.db", alias="DATABASE_URL"
    )
    upload_root: str = Field(default="uploads", alias="UPLOAD_ROOT")
    # 10 MB for documents, 5 MB for photos
    max_upload_size: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_SIZE")
    max_image_size: int = Field(default=5 * 1024 * 1024, alias="MAX_IMAGE_SIZE")
    expiry_warning_days: int = Field(default=30, alias="EXPIRY_WARNING_DAYS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


def _env_default(name: str) -> str:
    field = Settings.model_fields[name]
    return os.getenv(field.alias, str(field.default))


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings(
        database_url=_env_default("database_url"),
        upload_root=_env_default("upload_root"),
        max_upload_size=int(_env_default("max_upload_size")),
        max_image_size=int(_env_default("max_image_size")),
        expiry_warning_days=int(_env_default("expiry_warning_days")),
        log_level=_env_default("log_level"),
    )
