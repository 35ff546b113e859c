"""Employee and employee role models."""
from datetime import date, datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AddressMixin, Base
from .enums import EducationLevel, Gender, MaritalStatus, enum_column

employee_role_links = Table(
    "employee_role_links",
    Base.metadata,
    Column("employee_id", ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("employee_roles.id", ondelete="CASCADE"), primary_key=True),
)


class EmployeeRole(Base):
    """Role an employee can hold (driver, site manager, ...)."""

    __tablename__ = "employee_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class Employee(AddressMixin, Base):
    """Personal record of a member of staff."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), index=True)
    last_name: Mapped[str] = mapped_column(String(50), index=True)
    birth_date: Mapped[date] = mapped_column(Date)
    birth_place: Mapped[str | None] = mapped_column(String(100), nullable=True)
    gender: Mapped[Gender | None] = mapped_column(enum_column(Gender), nullable=True)
    fiscal_code: Mapped[str] = mapped_column(String(16), unique=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    pec: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(20), nullable=True)
    iban: Mapped[str | None] = mapped_column(String(27), nullable=True)
    marital_status: Mapped[MaritalStatus | None] = mapped_column(enum_column(MaritalStatus), nullable=True)
    education_level: Mapped[EducationLevel | None] = mapped_column(
        enum_column(EducationLevel), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    roles: Mapped[list[EmployeeRole]] = relationship(
        secondary=employee_role_links, lazy="selectin", order_by=EmployeeRole.name
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
