"""Payslip model."""
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import PayslipStatus, enum_column


class Payslip(Base):
    """Monthly payslip PDF matched to an employee by fiscal code."""

    __tablename__ = "payslips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True
    )
    fiscal_code: Mapped[str] = mapped_column(String(16), index=True)
    reference_month: Mapped[str] = mapped_column(String(7), index=True)
    storage_path: Mapped[str] = mapped_column(String(500))
    original_filename: Mapped[str] = mapped_column(String(255))
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    status: Mapped[PayslipStatus] = mapped_column(enum_column(PayslipStatus), default=PayslipStatus.PENDING)
