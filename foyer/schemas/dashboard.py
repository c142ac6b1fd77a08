# =====================================================================
# ESQUEMAS DE DASHBOARD Y ESTADÍSTICAS
# =====================================================================

from __future__ import annotations

from typing import Literal, List
from pydantic import BaseModel

# =========================================================
# BLOQUES DEL DASHBOARD
# =========================================================

class FreeRoom(BaseModel):
    id: str
    number: str


class RoomBlock(BaseModel):
    """
    Ocupación de chambres.

    Attributes:
        total (int): Total de chambres
        available (int): Chambres sin ocupantes
        occupied (int): Chambres con al menos un ocupante
        occupancy_rate (int): round(occupied / total * 100), 0 sin chambres
        free_rooms (List[FreeRoom]): Chambres libres
    """
    total: int
    available: int
    occupied: int
    occupancy_rate: int
    free_rooms: List[FreeRoom]


class CapacityBlock(BaseModel):
    total_capacity: int
    total_beds: int
    total_occupants: int
    available_places: int


class ResidentBlock(BaseModel):
    total: int
    male: int
    female: int
    internal: int
    external: int
    with_room: int
    without_room: int


class StaffBlock(BaseModel):
    total: int
    active: int
    inactive: int


class Alert(BaseModel):
    id: str
    type: Literal["warning", "info"]
    message: str


class DashboardStats(BaseModel):
    """Contenido de ``data`` en GET /dashboard/stats."""
    rooms: RoomBlock
    capacity: CapacityBlock
    residents: ResidentBlock
    staff: StaffBlock
    alerts: List[Alert]


class QuickStats(BaseModel):
    """Variante plana para la cabecera del front."""
    total_rooms: int
    available_rooms: int
    occupancy_rate: int
    total_residents: int
    residents_without_room: int
    total_staff: int
