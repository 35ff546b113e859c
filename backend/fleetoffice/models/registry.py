"""Correspondence register and compliance (safety) items."""
from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import CorrespondenceType, enum_column


class Correspondence(Base):
    """Incoming or outgoing letter with a yearly protocol number."""

    __tablename__ = "correspondence"
    __table_args__ = (
        UniqueConstraint("year", "direction", "progressive", name="uq_correspondence_protocol"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    progressive: Mapped[int] = mapped_column(Integer)
    year: Mapped[int] = mapped_column(Integer, index=True)
    direction: Mapped[CorrespondenceType] = mapped_column(enum_column(CorrespondenceType, length=1))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    protocol_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    sender: Mapped[str] = mapped_column(String(200))
    recipient: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def protocol(self) -> str:
        return format_protocol(self.progressive, self.year)


def format_protocol(progressive: int, year: int) -> str:
    return "%03d/%d" % (progressive, year)


class ComplianceCategory(Base):
    """Grouping for compliance items (medical visits, training, ...)."""

    __tablename__ = "compliance_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class ComplianceItem(Base):
    """Recurring safety obligation with a due date."""

    __tablename__ = "compliance_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("compliance_categories.id"), index=True)
    employee_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    visit_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    periodicity_years: Mapped[int | None] = mapped_column(Integer, nullable=True)
    due_date: Mapped[date] = mapped_column(Date, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
