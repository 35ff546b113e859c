"""Fleet vehicle model."""
from datetime import date

from sqlalchemy import Boolean, Date, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import FuelType, OwnershipType, VehicleStatus, VehicleType, enum_column


class Vehicle(Base):
    """Company vehicle, owned or on long-term rental."""

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    plate: Mapped[str] = mapped_column(String(10), unique=True)
    chassis_number: Mapped[str | None] = mapped_column(String(17), unique=True, nullable=True)
    brand: Mapped[str] = mapped_column(String(50))
    model: Mapped[str] = mapped_column(String(50))
    series: Mapped[str | None] = mapped_column(String(50), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    vehicle_type: Mapped[VehicleType | None] = mapped_column(enum_column(VehicleType), nullable=True)
    fuel_type: Mapped[FuelType | None] = mapped_column(enum_column(FuelType), nullable=True)
    ownership: Mapped[OwnershipType | None] = mapped_column(enum_column(OwnershipType), nullable=True)
    supplier_id: Mapped[int | None] = mapped_column(
        ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True
    )
    registration_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_duration_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contract_km: Mapped[int | None] = mapped_column(Integer, nullable=True)
    monthly_fee: Mapped[float] = mapped_column(Float, default=0.0)
    fringe_benefit: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[VehicleStatus] = mapped_column(
        enum_column(VehicleStatus), default=VehicleStatus.IN_SERVICE
    )
    current_mileage: Mapped[int] = mapped_column(Integer, default=0)
    telepass: Mapped[bool] = mapped_column(Boolean, default=False)
    insurance_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    car_tax_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    image_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
