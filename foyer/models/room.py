# =====================================================================
# MODELO DE CHAMBRES
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, SmallInteger, Boolean, JSON, DateTime, UniqueConstraint, CheckConstraint, func
from datetime import datetime
from typing import Optional, List

from .base import Base, room_gender_enum, room_type_enum

class Room(Base):
    """
    Chambre del foyer.

    Los ocupantes no se guardan aquí: son los stagiaires cuyo ``room_id``
    apunta a esta chambre. ``floor`` y ``bed_count`` se derivan del número y
    de la capacidad en cada escritura (ver foyer/services/derivations.py).
    """
    __tablename__ = "room"
    __table_args__ = (
        UniqueConstraint("number", name="uq_room_number"),
        UniqueConstraint("number", "floor", name="uq_room_number_floor"),
        CheckConstraint("capacity BETWEEN 1 AND 6", name="ck_room_capacity"),
        CheckConstraint("floor BETWEEN 1 AND 10", name="ck_room_floor"),
    )

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    number: Mapped[str] = mapped_column(String(20), nullable=False)

    # ---------- Capacidad y ubicación ----------
    capacity: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=2)
    bed_count: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=2)
    floor: Mapped[int] = mapped_column(Integer, nullable=False, default=1, index=True)

    # ---------- Política y descripción ----------
    gender: Mapped[str] = mapped_column(room_gender_enum, nullable=False, default="boys", index=True)
    room_type: Mapped[str] = mapped_column(room_type_enum, nullable=False, default="double")
    description: Mapped[Optional[str]] = mapped_column(Text)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # ---------- Auditoría ----------
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Room(id={self.id[:8]}..., number={self.number}, floor={self.floor})>"

    def __str__(self) -> str:
        return f"Chambre {self.number}"
