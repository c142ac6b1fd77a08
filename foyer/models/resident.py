# =====================================================================
# MODELO DE STAGIAIRES (RESIDENTES)
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, Float, ForeignKey, Date, DateTime, UniqueConstraint, CheckConstraint, func
from datetime import datetime, date
from typing import Optional

from .base import Base, resident_type_enum, resident_gender_enum, cycle_enum, payment_status_enum

class Resident(Base):
    """
    Modelo de Stagiaire para el sistema de gestión del foyer.
    Un stagiaire interno se aloja en una chambre; uno externo solo come en el foyer.
    """
    __tablename__ = "resident"
    __table_args__ = (
        UniqueConstraint("email", name="uq_resident_email"),
        UniqueConstraint("identifier", name="uq_resident_identifier"),
        UniqueConstraint("telephone", name="uq_resident_telephone"),
        UniqueConstraint("phone_number", name="uq_resident_phone_number"),
        UniqueConstraint("cin_number", name="uq_resident_cin_number"),
        CheckConstraint(
            "departure_date IS NULL OR departure_date > arrival_date",
            name="ck_resident_stay_window",
        ),
    )

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    identifier: Mapped[str] = mapped_column(String(32), nullable=False)

    # ---------- Datos personales ----------
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    telephone: Mapped[Optional[str]] = mapped_column(String(32))
    phone_number: Mapped[Optional[str]] = mapped_column(String(32))
    gender: Mapped[str] = mapped_column(resident_gender_enum, nullable=False, index=True)
    cin_number: Mapped[Optional[str]] = mapped_column(String(8))
    cin_place: Mapped[Optional[str]] = mapped_column(Text)
    cin_date: Mapped[Optional[date]] = mapped_column(Date)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)
    place_of_birth: Mapped[Optional[str]] = mapped_column(Text)
    nationality: Mapped[Optional[str]] = mapped_column(Text)
    address: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(Text)
    postal_code: Mapped[Optional[str]] = mapped_column(String(16))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # ---------- Formación ----------
    company: Mapped[Optional[str]] = mapped_column(Text)
    specialization: Mapped[Optional[str]] = mapped_column(Text)
    group_number: Mapped[Optional[str]] = mapped_column(String(32))
    training_period_from: Mapped[Optional[date]] = mapped_column(Date)
    training_period_to: Mapped[Optional[date]] = mapped_column(Date)

    # ---------- Clasificación ----------
    type: Mapped[str] = mapped_column(resident_type_enum, nullable=False, default="internal", index=True)
    cycle: Mapped[str] = mapped_column(cycle_enum, nullable=False, index=True)
    session_year: Mapped[Optional[str]] = mapped_column(String(4), index=True)

    # ---------- Estancia ----------
    arrival_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    departure_date: Mapped[Optional[date]] = mapped_column(Date)

    # ---------- Chambre (única fuente de verdad de la ocupación) ----------
    room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("room.id", ondelete="SET NULL"),
        index=True,
    )

    # ---------- Pagos: restauration / hébergement (por trimestre) ----------
    lodging_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lodging_status: Mapped[str] = mapped_column(payment_status_enum, nullable=False, default="paid")
    lodging_term1_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lodging_term2_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lodging_term3_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # ---------- Pagos: inscription (anual) ----------
    registration_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    registration_status: Mapped[str] = mapped_column(payment_status_enum, nullable=False, default="paid")
    registration_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    total_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # ---------- Auditoría ----------
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Resident(id={self.id[:8]}..., identifier={self.identifier}, type={self.type})>"

    def __str__(self) -> str:
        return f"Stagiaire {self.full_name} ({self.identifier})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_internal(self) -> bool:
        return self.type == "internal"

    @property
    def has_room(self) -> bool:
        return self.room_id is not None
