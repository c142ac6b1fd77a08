# =====================================================================
# MODELO DE PERSONAL
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Date, DateTime, UniqueConstraint, func
from datetime import datetime, date
from typing import Optional

from .base import Base, staff_status_enum

DEPARTMENTS = (
    "Administration",
    "Ressources Humaines",
    "Sécurité",
    "Restauration",
    "Technique",
    "Hébergement",
)

class Staff(Base):
    """
    Miembro del personal del foyer (surveillants, cocina, mantenimiento...).
    """
    __tablename__ = "staff"
    __table_args__ = (
        UniqueConstraint("identifier", name="uq_staff_identifier"),
        UniqueConstraint("email", name="uq_staff_email"),
        UniqueConstraint("phone", name="uq_staff_phone"),
        UniqueConstraint("first_name", "last_name", "hire_date", name="uq_staff_name_hire_date"),
    )

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    identifier: Mapped[str] = mapped_column(String(16), nullable=False)

    # ---------- Datos personales ----------
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Empleo ----------
    position: Mapped[str] = mapped_column(Text, nullable=False)
    department: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(staff_status_enum, nullable=False, default="active", index=True)

    # ---------- Auditoría ----------
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Staff(id={self.id[:8]}..., identifier={self.identifier})>"

    @property
    def is_active(self) -> bool:
        return self.status == "active"
