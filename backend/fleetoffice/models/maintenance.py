"""Maintenance records, task types and scheduled vehicle tasks."""
from datetime import date

from sqlalchemy import Boolean, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import TaskStatus, enum_column


class TaskType(Base):
    """Kind of recurring job (service, tyre change, revision...)."""

    __tablename__ = "task_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True)
    description: Mapped[str | None] = mapped_column(String(200), nullable=True)
    by_date: Mapped[bool] = mapped_column(Boolean, default=True)
    by_mileage: Mapped[bool] = mapped_column(Boolean, default=False)
    months_interval: Mapped[int | None] = mapped_column(Integer, nullable=True)
    km_interval: Mapped[int | None] = mapped_column(Integer, nullable=True)
    auto: Mapped[bool] = mapped_column(Boolean, default=True)


class Maintenance(Base):
    """Work carried out on a vehicle."""

    __tablename__ = "maintenance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), index=True)
    supplier_id: Mapped[int | None] = mapped_column(
        ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True
    )
    task_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("task_types.id", ondelete="SET NULL"), nullable=True
    )
    service_date: Mapped[date] = mapped_column(Date)
    mileage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cost: Mapped[float] = mapped_column(Float, default=0.0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class VehicleTask(Base):
    """A scheduled job for a vehicle, due on a date and/or mileage."""

    __tablename__ = "vehicle_tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), index=True)
    task_type_id: Mapped[int] = mapped_column(ForeignKey("task_types.id"))
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_mileage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(enum_column(TaskStatus), default=TaskStatus.OPEN)
    executed: Mapped[bool] = mapped_column(Boolean, default=False)
