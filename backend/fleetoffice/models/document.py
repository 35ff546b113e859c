"""Generic file attachment model."""
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import DocumentType, OwnerType, enum_column


class Document(Base):
    """File stored on disk and attached to any owning record."""

    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_owner", "owner_type", "owner_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_type: Mapped[OwnerType] = mapped_column(enum_column(OwnerType))
    owner_id: Mapped[int] = mapped_column(Integer)
    document_type: Mapped[DocumentType] = mapped_column(enum_column(DocumentType, length=40))
    path: Mapped[str] = mapped_column(String(500))
    original_filename: Mapped[str] = mapped_column(String(255))
    content_type: Mapped[str | None] = mapped_column(String(150), nullable=True)
    size: Mapped[int] = mapped_column(Integer, default=0)
    issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]
