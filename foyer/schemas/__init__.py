# =====================================================================
# MÓDULO DE ESQUEMAS DE PYDANTIC
# =====================================================================

"""
Esquemas de Pydantic de la API del foyer, uno por entidad.
"""

from .enums import (
    UserRole, ResidentType, ResidentGender, CycleCode, PaymentStatus,
    RoomGender, RoomType, RoomStatus, StaffStatus, Department, Weekday,
)
from .common import ApiResponse, envelope
from .auth import LoginRequest, TokenResponse, UserOut, UserCreate, UserUpdate
from .resident import (
    LodgingPayment, RegistrationPayment, ResidentCreate, ResidentUpdate,
    ResidentOut, ResidentSummary, ResidentList, RoomRef,
)
from .room import (
    RoomCreate, RoomUpdate, RoomOut, AssignOccupantsRequest, AssignmentResult,
    OccupantConflict, ConflictReport, RoomInfo, AvailableResidentsOut,
    RoomGroupStats, RoomOverallStats, RoomStatistics,
)
from .staff import StaffCreate, StaffUpdate, StaffOut, StaffStats
from .schedule import ScheduleDayIn, ScheduleWeekItem, ScheduleWeekIn, ScheduleEntryOut, StaffScheduleOut, ScheduleSummary
from .dashboard import FreeRoom, RoomBlock, CapacityBlock, ResidentBlock, StaffBlock, Alert, DashboardStats, QuickStats
from .filters import ResidentFilters

__all__ = [
    "UserRole", "ResidentType", "ResidentGender", "CycleCode", "PaymentStatus",
    "RoomGender", "RoomType", "RoomStatus", "StaffStatus", "Department", "Weekday",
    "ApiResponse", "envelope",
    "LoginRequest", "TokenResponse", "UserOut", "UserCreate", "UserUpdate",
    "LodgingPayment", "RegistrationPayment", "ResidentCreate", "ResidentUpdate",
    "ResidentOut", "ResidentSummary", "ResidentList", "RoomRef",
    "RoomCreate", "RoomUpdate", "RoomOut", "AssignOccupantsRequest", "AssignmentResult",
    "OccupantConflict", "ConflictReport", "RoomInfo", "AvailableResidentsOut",
    "RoomGroupStats", "RoomOverallStats", "RoomStatistics",
    "StaffCreate", "StaffUpdate", "StaffOut", "StaffStats",
    "ScheduleDayIn", "ScheduleWeekItem", "ScheduleWeekIn", "ScheduleEntryOut", "StaffScheduleOut", "ScheduleSummary",
    "FreeRoom", "RoomBlock", "CapacityBlock", "ResidentBlock", "StaffBlock", "Alert", "DashboardStats", "QuickStats",
    "ResidentFilters",
]
