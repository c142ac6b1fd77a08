# =====================================================================
# MODELO DE CONTADORES
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, BigInteger

from .base import Base

class Counter(Base):
    """
    Secuencia con nombre. Una fila por contador; se incrementa de forma
    atómica desde foyer/services/counter.py.
    """
    __tablename__ = "counter"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Counter(name={self.name}, value={self.value})>"
