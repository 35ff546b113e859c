"""Supplier contracts and insurance policies."""
from datetime import date

from sqlalchemy import Boolean, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import (
    CurrencyCode,
    RecurringFrequency,
    SupplierContractStatus,
    SupplierContractType,
    enum_column,
)


def months_between(start: date | None, end: date | None) -> int | None:
    """Whole months from ``start`` to ``end`` (years * 12 + months)."""

    if start is None or end is None:
        return None
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


class Contract(Base):
    """Agreement with a supplier."""

    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), index=True)
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    contract_type: Mapped[SupplierContractType] = mapped_column(enum_column(SupplierContractType))
    subject: Mapped[str] = mapped_column(String(255))
    status: Mapped[SupplierContractStatus] = mapped_column(
        enum_column(SupplierContractStatus), default=SupplierContractStatus.DRAFT
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    termination_notice_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expiry_reminder: Mapped[bool] = mapped_column(Boolean, default=False)
    net_amount: Mapped[float] = mapped_column(Float, default=0.0)
    vat_rate: Mapped[float] = mapped_column(Float, default=0.0)
    currency: Mapped[CurrencyCode] = mapped_column(enum_column(CurrencyCode), default=CurrencyCode.EUR)
    payment_terms: Mapped[str | None] = mapped_column(String(255), nullable=True)
    periodic_fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    recurring_frequency: Mapped[RecurringFrequency | None] = mapped_column(
        enum_column(RecurringFrequency), nullable=True
    )
    durc_required: Mapped[bool] = mapped_column(Boolean, default=False)
    durc_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    reference_person: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def duration_months(self) -> int | None:
        return months_between(self.start_date, self.end_date)

    @property
    def gross_amount(self) -> float:
        net = self.net_amount or 0.0
        return round(net + net * (self.vat_rate or 0.0) / 100, 2)


class Insurance(Base):
    """Insurance policy, optionally tied to a project."""

    __tablename__ = "insurances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    supplier_id: Mapped[int | None] = mapped_column(
        ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True
    )
    policy_number: Mapped[str] = mapped_column(String(50))
    policy_type: Mapped[str] = mapped_column(String(100))
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    guaranteed_amount: Mapped[float] = mapped_column(Float, default=0.0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
