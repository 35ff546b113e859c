"""Vehicle assignment model."""
from datetime import date, time

from sqlalchemy import Date, ForeignKey, Integer, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import AssignmentStatus, enum_column


class Assignment(Base):
    """A vehicle handed to an employment for a period."""

    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employment_id: Mapped[int] = mapped_column(ForeignKey("employments.id"), index=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id"), index=True)
    project_id: Mapped[int | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )
    start_date: Mapped[date] = mapped_column(Date)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        enum_column(AssignmentStatus), default=AssignmentStatus.ASSIGNED
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    def is_active(self, today: date | None = None) -> bool:
        """ASSIGNED and either open-ended or ending today or later."""

        today = today or date.today()
        return self.status == AssignmentStatus.ASSIGNED and (
            self.end_date is None or self.end_date >= today
        )
