"""
Funciones puras que derivan campos calculados de stagiaires y chambres.
Los servicios las llaman explícitamente antes de cada escritura.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from foyer.exceptions import ValidationError

MIN_FLOOR = 1
MAX_FLOOR = 10

CYCLE_ALIASES = {
    "sep": "sep",
    "septembre": "sep",
    "nov": "nov",
    "novembre": "nov",
    "fev": "fev",
    "fevrier": "fev",
    "février": "fev",
}

EXTERNAL_CYCLE = "external"
EXTERNAL_PREFIX = "EXT"

# Sexo de la chambre → sexo de stagiaire aceptado (None = cualquiera)
ROOM_GENDER_RULES = {
    "boys": "male",
    "girls": "female",
    "mixed": None,
}


# ---------- Chambres ----------

def floor_from_room_number(number: str) -> int:
    """
    Deriva el étage de la parte numérica del número de chambre:
    100-199 → 1, 200-299 → 2, ..., 1000-1099 → 10; cualquier otro valor → 1.
    """
    digits = re.sub(r"\D", "", number or "")
    if not digits:
        return MIN_FLOOR
    value = int(digits)
    floor = value // 100
    if MIN_FLOOR <= floor <= MAX_FLOOR:
        return floor
    return MIN_FLOOR


def bed_count_for(capacity: int) -> int:
    return capacity


def room_status(occupant_count: int) -> str:
    return "available" if occupant_count == 0 else "occupied"


def percentage(part: int, total: int) -> int:
    """Porcentaje entero; 0 cuando no hay total."""
    if not total:
        return 0
    return round(part / total * 100)


def is_gender_compatible(room_gender: str, resident_gender: str) -> bool:
    expected = ROOM_GENDER_RULES.get(room_gender)
    return expected is None or expected == resident_gender


# ---------- Stagiaires ----------

def normalize_cycle(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cycle = CYCLE_ALIASES.get(value.strip().lower())
    if cycle is None:
        raise ValidationError("Le cycle doit être 'sep', 'nov' ou 'fev'")
    return cycle


def compute_total_amount(
    resident_type: str,
    lodging_enabled: bool,
    lodging_status: str,
    term_prices: tuple[float, float, float],
    registration_enabled: bool,
    registration_status: str,
    registration_price: float,
) -> float:
    """
    Importe total pagado. Los internos se facturan por el libro trimestral de
    restauration, los externos por la inscription anual. Un libro solo cuenta
    si está activado y su estado es 'paid'.
    """
    if resident_type == "internal":
        if lodging_enabled and lodging_status == "paid":
            return float(sum(term_prices))
        return 0.0
    if registration_enabled and registration_status == "paid":
        return float(registration_price)
    return 0.0


def total_amount_of(resident) -> float:
    return compute_total_amount(
        resident.type,
        resident.lodging_enabled,
        resident.lodging_status,
        (resident.lodging_term1_price, resident.lodging_term2_price, resident.lodging_term3_price),
        resident.registration_enabled,
        resident.registration_status,
        resident.registration_price,
    )


def identifier_prefix(resident_type: str, cycle: str, session_year: Optional[str], arrival_date: date) -> str:
    """'SEP24', 'NOV25', 'EXT24'... El año es el de la sesión o, sin sesión, el de llegada."""
    year = session_year or str(arrival_date.year)
    code = EXTERNAL_PREFIX if resident_type == "external" else cycle.upper()
    return f"{code}{year[-2:]}"


def format_resident_identifier(prefix: str, sequence: int) -> str:
    return f"{prefix}-{sequence:04d}"


def check_resident_state(resident_type: str, cycle: Optional[str], session_year: Optional[str],
                         arrival_date: date, departure_date: Optional[date]) -> str:
    """
    Valida clasificación y ventana de estancia; devuelve el ciclo efectivo
    ('external' para los externos).
    """
    if departure_date is not None and departure_date <= arrival_date:
        raise ValidationError("La date de départ doit être postérieure à la date d'arrivée")
    if resident_type == "external":
        return EXTERNAL_CYCLE
    if not cycle or cycle == EXTERNAL_CYCLE:
        raise ValidationError("Le cycle est requis pour un stagiaire interne")
    if not session_year:
        raise ValidationError("L'année de session est requise pour un stagiaire interne")
    return cycle
