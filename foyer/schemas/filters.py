# =====================================================================
# FILTROS DEL LISTADO DE STAGIAIRES
# =====================================================================

from __future__ import annotations

from typing import Annotated, Literal, Mapping, Optional, Tuple
from datetime import date
from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator,
    ValidationError as PydanticValidationError,
)

from foyer.exceptions import ValidationError
from .enums import ResidentGender, ResidentType

# Nombres de sesión aceptados en la query → código de ciclo
SESSION_ALIASES = {
    "septembre": "sep",
    "sep": "sep",
    "novembre": "nov",
    "nov": "nov",
    "fevrier": "fev",
    "février": "fev",
    "fev": "fev",
}

# Sexo del stagiaire; el front reutiliza los nombres de las chambres
GENDER_ALIASES = {
    "male": "male",
    "homme": "male",
    "garcon": "male",
    "garçon": "male",
    "female": "female",
    "femme": "female",
    "fille": "female",
}

PAYMENT_FILTER_ALIASES = {
    "paid": "paid",
    "payé": "paid",
    "paye": "paid",
    "unpaid": "unpaid",
    "impayé": "unpaid",
    "impaye": "unpaid",
    "exempt": "exempt",
    "dispensé": "exempt",
    "dispense": "exempt",
}

# Campos ordenables (query en camelCase o snake_case → columna)
SORT_FIELDS = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "first_name": "first_name",
    "firstName": "first_name",
    "last_name": "last_name",
    "lastName": "last_name",
    "email": "email",
    "identifier": "identifier",
    "arrival_date": "arrival_date",
    "arrivalDate": "arrival_date",
    "departure_date": "departure_date",
    "departureDate": "departure_date",
    "session_year": "session_year",
    "company": "company",
}

ALL_TERMS = (1, 2, 3)


def _session(value):
    if isinstance(value, str):
        cycle = SESSION_ALIASES.get(value.strip().lower())
        if cycle is None:
            raise ValueError(f"Session inconnue: {value}")
        return cycle
    return value


def _gender(value):
    if isinstance(value, str):
        gender = GENDER_ALIASES.get(value.strip().lower())
        if gender is None:
            raise ValueError(f"Genre inconnu: {value}")
        return gender
    return value


def _payment_filter(value):
    if isinstance(value, str):
        status = PAYMENT_FILTER_ALIASES.get(value.strip().lower())
        if status is None:
            raise ValueError(f"Statut de paiement inconnu: {value}")
        return status
    return value


def _sort_field(value):
    if isinstance(value, str):
        column = SORT_FIELDS.get(value.strip())
        if column is None:
            raise ValueError(f"Tri impossible sur le champ: {value}")
        return column
    return value


PaymentFilter = Annotated[Optional[Literal["paid", "unpaid", "exempt"]], BeforeValidator(_payment_filter)]


class ResidentFilters(BaseModel):
    """
    Filtros reconocidos del listado de stagiaires, ya normalizados.
    Un valor vacío o 'all' equivale a no filtrar.

    Attributes:
        search (Optional[str]): Subcadena en nombre, apellido, email, identificador o empresa
        status (Optional[str]): 'active' o 'inactive' según la ventana de estancia
        room (Optional[str]): 'withRoom' o 'withoutRoom'
        specific_room (Optional[str]): Subcadena del número de chambre (solo con withRoom)
        gender (Optional[str]): 'male' o 'female'
        type (Optional[str]): 'internal' o 'external'
        cycle (Optional[str]): Código de ciclo (query ``session``)
        year (Optional[str]): Año de sesión
        start_date / end_date (Optional[date]): Límites de la fecha de llegada
        lodging_status / registration_status: 'paid', 'unpaid' o 'exempt'
        lodging_terms (Tuple[int, ...]): Trimestres seleccionados (todos si está vacío)
        sort_by (str): Columna de ordenación (default created_at)
        sort_order (str): 'asc' o 'desc' (default desc)
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    search: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None
    room: Optional[Literal["withRoom", "withoutRoom"]] = None
    specific_room: Optional[str] = Field(None, alias="specificRoom")
    gender: Annotated[Optional[ResidentGender], BeforeValidator(_gender)] = None
    type: Optional[ResidentType] = None
    cycle: Annotated[Optional[Literal["sep", "nov", "fev"]], BeforeValidator(_session)] = Field(None, alias="session")
    year: Optional[str] = Field(None, pattern=r"^\d{4}$")
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    lodging_status: PaymentFilter = Field(None, alias="lodgingStatus")
    lodging_terms: Tuple[int, ...] = Field((), alias="lodgingTerms")
    registration_status: PaymentFilter = Field(None, alias="registrationStatus")
    sort_by: Annotated[str, BeforeValidator(_sort_field)] = Field("created_at", alias="sortBy")
    sort_order: Literal["asc", "desc"] = Field("desc", alias="sortOrder")

    @model_validator(mode="before")
    @classmethod
    def _drop_not_applied(cls, data):
        if isinstance(data, Mapping):
            return {
                key: value.strip() if isinstance(value, str) else value
                for key, value in data.items()
                if not (isinstance(value, str) and value.strip().lower() in ("", "all"))
            }
        return data

    @field_validator("lodging_terms", mode="before")
    @classmethod
    def _parse_terms(cls, value):
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        terms = []
        for part in value or ():
            try:
                term = int(part)
            except (TypeError, ValueError):
                raise ValueError(f"Trimestre invalide: {part}")
            if term not in ALL_TERMS:
                raise ValueError(f"Trimestre invalide: {part}")
            if term not in terms:
                terms.append(term)
        return tuple(sorted(terms))

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("La date de début doit précéder la date de fin")
        return self

    @property
    def selected_terms(self) -> Tuple[int, ...]:
        return self.lodging_terms or ALL_TERMS

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "ResidentFilters":
        """Construye los filtros desde los query params; error 400 si un valor no es válido."""
        try:
            return cls.model_validate(dict(params))
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = str(first.get("msg", "")).removeprefix("Value error, ")
            raise ValidationError(f"{location}: {message}" if location else message)
