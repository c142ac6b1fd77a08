# =====================================================================
# MODELO BASE Y ENUMERACIONES PARA LA BASE DE DATOS
# =====================================================================

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import Enum

# ---------- Clase Base para todos los modelos ----------
class Base(DeclarativeBase):
    """
    Clase base declarativa para todos los modelos de SQLAlchemy.
    Proporciona funcionalidad común a todas las entidades.
    """
    pass

# ---------- Enumeraciones ----------
# Los valores deben coincidir con los Literal de foyer/schemas/enums.py

user_role_enum = Enum(
    'superadmin', 'admin', 'staff',
    name='user_role_enum',
)

resident_type_enum = Enum(
    'internal', 'external',
    name='resident_type_enum',
)

resident_gender_enum = Enum(
    'male', 'female',
    name='resident_gender_enum',
)

cycle_enum = Enum(
    'sep', 'nov', 'fev', 'external',
    name='cycle_enum',
)

payment_status_enum = Enum(
    'paid', 'exempt',
    name='payment_status_enum',
)

room_gender_enum = Enum(
    'boys', 'girls', 'mixed',
    name='room_gender_enum',
)

room_type_enum = Enum(
    'simple', 'double', 'triple', 'quadruple', 'accessible', 'standard',
    name='room_type_enum',
)

staff_status_enum = Enum(
    'active', 'inactive',
    name='staff_status_enum',
)

weekday_enum = Enum(
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    name='weekday_enum',
)
