"""Short-term vehicle booking model."""
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import BookingStatus, enum_column


class VehicleBooking(Base):
    """A vehicle reserved for a time window, outside of any assignment."""

    __tablename__ = "vehicle_bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), index=True)
    start_at: Mapped[datetime] = mapped_column(DateTime)
    end_at: Mapped[datetime] = mapped_column(DateTime)
    title: Mapped[str | None] = mapped_column(String(120), nullable=True)
    requester_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    requester_contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[BookingStatus] = mapped_column(enum_column(BookingStatus), default=BookingStatus.PLANNED)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
