"""
Generación de identificadores legibles de stagiaires y personal.
"""
from __future__ import annotations

import logging
import random
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.exceptions import AppError
from foyer.models import Resident, Staff
from foyer.services.counter import SequenceCounter
from foyer.services.derivations import identifier_prefix, format_resident_identifier

logger = logging.getLogger(__name__)

RESIDENT_SEQUENCE = "resident"
MAX_ATTEMPTS = 20
STAFF_SUFFIX_RANGE = (1000, 9999)


class IdentifierExhausted(AppError):
    status_code = 500


async def next_resident_identifier(
    db: AsyncSession,
    counter: SequenceCounter,
    resident_type: str,
    cycle: str,
    session_year: Optional[str],
    arrival_date: date,
) -> str:
    """
    {CICLO}{aa}-{nnnn} con la secuencia global 'resident'. Si el valor ya
    existe (identificador introducido a mano) se toma el siguiente.
    """
    prefix = identifier_prefix(resident_type, cycle, session_year, arrival_date)
    for _ in range(MAX_ATTEMPTS):
        candidate = format_resident_identifier(prefix, await counter.next_value(RESIDENT_SEQUENCE))
        taken = await db.scalar(select(Resident.id).where(Resident.identifier == candidate))
        if taken is None:
            return candidate
        logger.warning(f"Identifiant {candidate} déjà utilisé, tirage suivant")
    raise IdentifierExhausted("Impossible de générer un identifiant unique pour le stagiaire")


async def generate_staff_identifier(
    db: AsyncSession,
    year: Optional[int] = None,
    rng: random.Random | None = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> str:
    """EMP{año}{1000-9999}; se vuelve a sortear mientras exista."""
    rng = rng or random.Random()
    year = year or date.today().year
    low, high = STAFF_SUFFIX_RANGE
    for _ in range(max_attempts):
        candidate = f"EMP{year}{rng.randint(low, high)}"
        taken = await db.scalar(select(Staff.id).where(Staff.identifier == candidate))
        if taken is None:
            return candidate
    raise IdentifierExhausted("Impossible de générer un identifiant unique pour l'employé")
