# =====================================================================
# ESQUEMAS DE STAGIAIRES
# =====================================================================

from __future__ import annotations

from typing import Annotated, Optional, List
from datetime import datetime, date
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from .enums import ResidentType, ResidentGender, CycleCode, PaymentStatus
from .validators import Email, OptionalText, CinNumber, SessionYear, normalize_payment_status

Status = Annotated[PaymentStatus, BeforeValidator(normalize_payment_status)]

# =========================================================
# LIBRO DE PAGOS
# =========================================================

class LodgingPayment(BaseModel):
    """
    Pagos de restauration/hébergement, un precio por trimestre.

    Attributes:
        enabled (bool): Si el stagiaire está sujeto a este concepto
        status (PaymentStatus): 'paid' o 'exempt' (acepta 'payé'/'dispensé')
        term1_price (float): Importe del primer trimestre
        term2_price (float): Importe del segundo trimestre
        term3_price (float): Importe del tercer trimestre
    """
    model_config = ConfigDict(from_attributes=True)

    enabled: bool = False
    status: Status = "paid"
    term1_price: float = Field(0, ge=0)
    term2_price: float = Field(0, ge=0)
    term3_price: float = Field(0, ge=0)


class RegistrationPayment(BaseModel):
    """
    Pago anual de inscription.

    Attributes:
        enabled (bool): Si el stagiaire está sujeto a este concepto
        status (PaymentStatus): 'paid' o 'exempt'
        price (float): Importe anual
    """
    model_config = ConfigDict(from_attributes=True)

    enabled: bool = False
    status: Status = "paid"
    price: float = Field(0, ge=0)


# =========================================================
# ESQUEMAS DE STAGIAIRES
# =========================================================

class ResidentBase(BaseModel):
    """Campos opcionales comunes a creación y actualización."""

    telephone: OptionalText = None
    phone_number: OptionalText = None
    cin_number: CinNumber = None
    cin_place: OptionalText = None
    cin_date: Optional[date] = None
    date_of_birth: Optional[date] = None
    place_of_birth: OptionalText = None
    nationality: OptionalText = None
    address: OptionalText = None
    city: OptionalText = None
    postal_code: OptionalText = None
    notes: OptionalText = None
    company: OptionalText = None
    specialization: OptionalText = None
    group_number: OptionalText = None
    training_period_from: Optional[date] = None
    training_period_to: Optional[date] = None
    departure_date: Optional[date] = None
    session_year: SessionYear = None
    room_id: OptionalText = None
    lodging: Optional[LodgingPayment] = None
    registration: Optional[RegistrationPayment] = None

    @field_validator("departure_date", "cin_date", "date_of_birth",
                     "training_period_from", "training_period_to", mode="before")
    @classmethod
    def _blank_dates(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ResidentCreate(ResidentBase):
    """
    Esquema para la creación de un stagiaire.

    Attributes:
        first_name (str): Nombre
        last_name (str): Apellido
        email (str): Email único
        gender (ResidentGender): 'male' o 'female'
        arrival_date (date): Fecha de llegada al foyer
        type (ResidentType): 'internal' (default) o 'external'
        cycle (Optional[str]): Ciclo (sep/nov/fev o septembre/novembre/fevrier); obligatorio para internos
        identifier (Optional[str]): Se genera automáticamente si no se envía
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Email
    gender: ResidentGender
    arrival_date: date
    type: ResidentType = "internal"
    cycle: OptionalText = None
    identifier: OptionalText = None


class ResidentUpdate(ResidentBase):
    """
    Esquema para la actualización parcial de un stagiaire.
    Solo se aplican los campos enviados (exclude_unset).
    """
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[Email] = None
    gender: Optional[ResidentGender] = None
    arrival_date: Optional[date] = None
    type: Optional[ResidentType] = None
    cycle: OptionalText = None


class RoomRef(BaseModel):
    """Datos mínimos de la chambre de un stagiaire."""
    id: str
    number: str
    floor: int
    capacity: int


class ResidentOut(BaseModel):
    """
    Esquema para la salida de datos de un stagiaire.
    El libro de pagos se devuelve anidado y ``total_amount`` ya calculado.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    identifier: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    telephone: Optional[str] = None
    phone_number: Optional[str] = None
    gender: ResidentGender
    cin_number: Optional[str] = None
    cin_place: Optional[str] = None
    cin_date: Optional[date] = None
    date_of_birth: Optional[date] = None
    place_of_birth: Optional[str] = None
    nationality: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    notes: Optional[str] = None
    company: Optional[str] = None
    specialization: Optional[str] = None
    group_number: Optional[str] = None
    training_period_from: Optional[date] = None
    training_period_to: Optional[date] = None
    type: ResidentType
    cycle: CycleCode
    session_year: Optional[str] = None
    arrival_date: date
    departure_date: Optional[date] = None
    room_id: Optional[str] = None
    room: Optional[RoomRef] = None
    lodging: LodgingPayment
    registration: RegistrationPayment
    total_amount: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, resident, room=None) -> "ResidentOut":
        """Construye la salida desde el modelo (columnas planas → libro anidado)."""
        data = {column: getattr(resident, column) for column in resident.__table__.columns.keys()}
        data["full_name"] = resident.full_name
        data["lodging"] = LodgingPayment(
            enabled=resident.lodging_enabled,
            status=resident.lodging_status,
            term1_price=resident.lodging_term1_price,
            term2_price=resident.lodging_term2_price,
            term3_price=resident.lodging_term3_price,
        )
        data["registration"] = RegistrationPayment(
            enabled=resident.registration_enabled,
            status=resident.registration_status,
            price=resident.registration_price,
        )
        if room is not None:
            data["room"] = RoomRef(id=room.id, number=room.number, floor=room.floor, capacity=room.capacity)
        return cls(**data)


class ResidentSummary(BaseModel):
    """Resumen de un stagiaire (ocupantes de una chambre, selectores)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    identifier: str
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    telephone: Optional[str] = None
    gender: ResidentGender
    type: ResidentType
    room_id: Optional[str] = None


class ResidentList(BaseModel):
    """Contenido de ``data`` en el listado de stagiaires."""
    stagiaires: List[ResidentOut]
