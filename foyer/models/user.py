# =====================================================================
# MODELO DE USUARIOS
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, UniqueConstraint, func
from datetime import datetime
from typing import Optional

from .base import Base, user_role_enum

class User(Base):
    """
    Cuenta del back office (administración del foyer).
    No confundir con los stagiaires ni con el personal.
    """
    __tablename__ = "user"
    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
    )

    # ---------- Identificación ----------
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    role: Mapped[str] = mapped_column(user_role_enum, nullable=False, default="staff")
    name: Mapped[str] = mapped_column(Text, nullable=False)

    # ---------- Datos de autenticación ----------
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # ---------- Auditoría ----------
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id[:8]}..., role={self.role})>"

    @property
    def is_superadmin(self) -> bool:
        """Verifica si el usuario tiene rol de superadministrador."""
        return self.role == "superadmin"

    @property
    def is_admin(self) -> bool:
        return self.role in ("superadmin", "admin")
