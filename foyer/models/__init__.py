# =====================================================================
# MÓDULO DE MODELOS DE BASE DE DATOS
# =====================================================================

"""
Módulo que contiene todos los modelos de la base de datos del foyer.
Cada modelo está separado en su propio archivo por entidad.
"""

# Importar la clase base y enumeraciones
from .base import (
    Base, user_role_enum, resident_type_enum, resident_gender_enum, cycle_enum,
    payment_status_enum, room_gender_enum, room_type_enum, staff_status_enum, weekday_enum,
)

# Importar modelos por entidad
from .user import User
from .room import Room
from .resident import Resident
from .staff import Staff, DEPARTMENTS
from .schedule import ScheduleEntry, WEEKDAYS, MAX_SHIFT_HOURS
from .counter import Counter

# Exportar todos los modelos para fácil importación
__all__ = [
    # Base y enums
    "Base",
    "user_role_enum",
    "resident_type_enum",
    "resident_gender_enum",
    "cycle_enum",
    "payment_status_enum",
    "room_gender_enum",
    "room_type_enum",
    "staff_status_enum",
    "weekday_enum",

    # Modelos principales
    "User",
    "Room",
    "Resident",
    "Staff",
    "ScheduleEntry",
    "Counter",

    # Constantes
    "DEPARTMENTS",
    "WEEKDAYS",
    "MAX_SHIFT_HOURS",
]
