# =====================================================================
# MODELO DE HORARIOS DEL PERSONAL
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, SmallInteger, ForeignKey, DateTime, UniqueConstraint, CheckConstraint, func
from datetime import datetime
from typing import Optional

from .base import Base, weekday_enum

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MAX_SHIFT_HOURS = 12

class ScheduleEntry(Base):
    """
    Turno de un miembro del personal para un día de la semana.
    Un día libre no lleva horas ni tareas.
    """
    __tablename__ = "schedule_entry"
    __table_args__ = (
        UniqueConstraint("staff_id", "weekday", name="uq_schedule_staff_weekday"),
        CheckConstraint(
            "is_day_off OR (start_hour BETWEEN 0 AND 23 AND end_hour BETWEEN 0 AND 23 "
            "AND end_hour > start_hour AND end_hour - start_hour <= 12)",
            name="ck_schedule_hours",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    staff_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    weekday: Mapped[str] = mapped_column(weekday_enum, nullable=False)

    # ---------- Turno ----------
    is_day_off: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_hour: Mapped[Optional[int]] = mapped_column(SmallInteger)
    end_hour: Mapped[Optional[int]] = mapped_column(SmallInteger)
    tasks: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Auditoría ----------
    updated_by: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("user.id", ondelete="SET NULL"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<ScheduleEntry(staff_id={self.staff_id[:8]}..., weekday={self.weekday})>"

    @property
    def hours(self) -> int:
        """Duración del turno en horas (0 si es día libre)."""
        if self.is_day_off or self.start_hour is None or self.end_hour is None:
            return 0
        return self.end_hour - self.start_hour
