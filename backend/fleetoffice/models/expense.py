"""Expense reports and their line items."""
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .enums import ExpenseStatus, PaymentMethod, enum_column


class ExpenseItem(Base):
    """One receipt or invoice inside an expense report."""

    __tablename__ = "expense_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    report_id: Mapped[int] = mapped_column(
        ForeignKey("expense_reports.id", ondelete="CASCADE"), index=True
    )
    item_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    description: Mapped[str] = mapped_column(String(255))
    amount: Mapped[float] = mapped_column(Float, default=0.0)
    invoice_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    supplier_id: Mapped[int | None] = mapped_column(
        ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True
    )
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)


class ExpenseReport(Base):
    """Expenses an employee asks to be reimbursed for."""

    __tablename__ = "expense_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    number: Mapped[str] = mapped_column(String(50), index=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), index=True)
    purpose: Mapped[str | None] = mapped_column(String(255), nullable=True)
    creation_date: Mapped[date] = mapped_column(Date)
    submit_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    approval_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total: Mapped[float] = mapped_column(Float, default=0.0)
    reimbursable: Mapped[float] = mapped_column(Float, default=0.0)
    non_reimbursable: Mapped[float] = mapped_column(Float, default=0.0)
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    payment_method: Mapped[PaymentMethod | None] = mapped_column(enum_column(PaymentMethod), nullable=True)
    status: Mapped[ExpenseStatus] = mapped_column(enum_column(ExpenseStatus), default=ExpenseStatus.DRAFT)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    items: Mapped[list[ExpenseItem]] = relationship(
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=ExpenseItem.id,
    )
