# =====================================================================
# VALIDADORES Y TIPOS REUTILIZABLES
# =====================================================================

from __future__ import annotations

import re
from typing import Annotated, Optional
from pydantic import AfterValidator, BeforeValidator

EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")
CIN_RE = re.compile(r"^\d{8}$")
YEAR_RE = re.compile(r"^\d{4}$")

# Alias en francés que envía el front para el estado de pago
PAYMENT_STATUS_ALIASES = {
    "paid": "paid",
    "payé": "paid",
    "paye": "paid",
    "exempt": "exempt",
    "dispensé": "exempt",
    "dispense": "exempt",
}


def normalize_email_value(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Veuillez fournir un email valide")
    return value


def blank_to_none(value):
    """Los formularios mandan '' para campos vacíos: se guardan como NULL."""
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, str):
        return value.strip()
    return value


def coerce_year(value):
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return blank_to_none(value)


def check_cin(value: Optional[str]) -> Optional[str]:
    if value is not None and not CIN_RE.match(value):
        raise ValueError("Le numéro de CIN doit contenir exactement 8 chiffres")
    return value


def check_year(value: Optional[str]) -> Optional[str]:
    if value is not None and not YEAR_RE.match(value):
        raise ValueError("L'année de session doit contenir 4 chiffres")
    return value


def normalize_payment_status(value):
    if isinstance(value, str):
        normalized = PAYMENT_STATUS_ALIASES.get(value.strip().lower())
        if normalized is None:
            raise ValueError("Le statut de paiement doit être 'paid' ou 'exempt'")
        return normalized
    return value


Email = Annotated[str, AfterValidator(normalize_email_value)]
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
CinNumber = Annotated[Optional[str], BeforeValidator(blank_to_none), AfterValidator(check_cin)]
SessionYear = Annotated[Optional[str], BeforeValidator(coerce_year), AfterValidator(check_year)]
