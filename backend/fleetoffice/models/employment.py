"""Employment (job contract) model."""
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import ContractType, EmploymentStatus, enum_column


class Employment(Base):
    """An employee's job position over a date range."""

    __tablename__ = "employments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), index=True)
    matricola: Mapped[str] = mapped_column(String(10), unique=True)
    contract_type: Mapped[ContractType | None] = mapped_column(enum_column(ContractType), nullable=True)
    branch: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contract_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ccnl: Mapped[str | None] = mapped_column(String(100), nullable=True)
    job_role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    salary: Mapped[float] = mapped_column(Float, default=0.0)
    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[EmploymentStatus] = mapped_column(
        enum_column(EmploymentStatus), default=EmploymentStatus.ACTIVE
    )
