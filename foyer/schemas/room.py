# =====================================================================
# ESQUEMAS DE CHAMBRES
# =====================================================================

from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .enums import RoomGender, RoomType, RoomStatus
from .resident import ResidentSummary

# =========================================================
# ESQUEMAS DE CHAMBRES
# =========================================================

class RoomCreate(BaseModel):
    """
    Esquema para la creación de una chambre.
    ``floor`` y ``bed_count`` no se aceptan: se derivan del número y la capacidad.

    Attributes:
        number (str): Número de la chambre (p. ej. "A-101")
        capacity (int): Capacidad (1-6, default 2)
        gender (RoomGender): 'boys', 'girls' o 'mixed'
        room_type (RoomType): Tipo de chambre
        description (Optional[str]): Notas libres
        amenities (List[str]): Equipamientos
    """
    number: str = Field(..., min_length=1, max_length=20)
    capacity: int = Field(2, ge=1, le=6)
    gender: RoomGender = "boys"
    room_type: RoomType = "double"
    description: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("number")
    @classmethod
    def _strip_number(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Le numéro de chambre est requis")
        return value


class RoomUpdate(BaseModel):
    number: Optional[str] = Field(None, min_length=1, max_length=20)
    capacity: Optional[int] = Field(None, ge=1, le=6)
    gender: Optional[RoomGender] = None
    room_type: Optional[RoomType] = None
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("number")
    @classmethod
    def _strip_number(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Le numéro de chambre est requis")
        return value


class RoomOut(BaseModel):
    """
    Salida de una chambre con su ocupación calculada.

    Attributes:
        status (RoomStatus): 'available' sin ocupantes, 'occupied' en otro caso
        occupant_count (int): Número de ocupantes
        available_places (int): Plazas libres
        occupancy_rate (float): Porcentaje de ocupación
        occupants (List[ResidentSummary]): Ocupantes resueltos
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    number: str
    capacity: int
    bed_count: int
    floor: int
    gender: RoomGender
    room_type: RoomType
    description: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    is_active: bool
    status: RoomStatus
    occupant_count: int
    available_places: int
    occupancy_rate: float
    occupants: List[ResidentSummary] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================================================
# ESQUEMAS DE ASIGNACIÓN DE OCUPANTES
# =========================================================

class AssignOccupantsRequest(BaseModel):
    """
    Lista completa de ocupantes de la chambre (reemplaza la anterior).
    Acepta ``resident_ids``, ``residentIds``, ``occupantIds`` o ``stagiaires``.
    """
    resident_ids: List[str] = Field(
        ...,
        validation_alias=AliasChoices("resident_ids", "residentIds", "occupantIds", "stagiaires"),
    )


class AssignmentResult(BaseModel):
    room: RoomOut
    added_count: int
    removed_count: int
    warnings: List[str] = Field(default_factory=list)
    message: str


class OccupantConflict(BaseModel):
    """Stagiaire que ya ocupa otra chambre."""
    resident_id: str
    room_id: str
    room_number: str


class ConflictReport(BaseModel):
    conflicts: List[OccupantConflict]
    has_conflicts: bool


class RoomInfo(BaseModel):
    number: str
    gender: RoomGender
    capacity: int
    current_occupants: int
    available_places: int


class AvailableResidentsOut(BaseModel):
    """Stagiaires que se pueden asignar a una chambre."""
    residents: List[ResidentSummary]
    room: RoomInfo


# =========================================================
# ESTADÍSTICAS DE CHAMBRES
# =========================================================

class RoomGroupStats(BaseModel):
    """Totales por sexo de chambre; ``rooms_with_space`` cuenta las que aún tienen plazas."""
    gender: RoomGender
    total_rooms: int
    total_capacity: int
    total_occupants: int
    rooms_with_space: int
    occupied_rooms: int


class RoomOverallStats(BaseModel):
    total_rooms: int
    total_capacity: int
    total_occupants: int
    average_occupancy: float


class RoomStatistics(BaseModel):
    by_gender: List[RoomGroupStats]
    overall: RoomOverallStats
