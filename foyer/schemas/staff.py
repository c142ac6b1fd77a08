# =====================================================================
# ESQUEMAS DE PERSONAL
# =====================================================================

from __future__ import annotations

from typing import Optional, Dict
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Department, StaffStatus
from .validators import Email, OptionalText

# =========================================================
# ESQUEMAS DE PERSONAL
# =========================================================

class StaffCreate(BaseModel):
    """
    Esquema para el alta de un miembro del personal.

    Attributes:
        first_name (str): Nombre
        last_name (str): Apellido
        email (str): Email único (se guarda en minúsculas)
        phone (str): Teléfono único
        position (str): Puesto
        department (Department): Departamento
        hire_date (date): Fecha de contratación
        status (StaffStatus): 'active' (default) o 'inactive'
        identifier (Optional[str]): EMP{año}{4 cifras} si no se envía
    """
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    email: Email
    phone: str = Field(..., min_length=1, max_length=32)
    position: str = Field(..., min_length=1)
    department: Department
    hire_date: date
    status: StaffStatus = "active"
    address: OptionalText = None
    identifier: OptionalText = None

    @field_validator("first_name", "last_name", "phone", "position")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Ce champ est requis")
        return value


class StaffUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=120)
    last_name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[Email] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    position: Optional[str] = Field(None, min_length=1)
    department: Optional[Department] = None
    hire_date: Optional[date] = None
    status: Optional[StaffStatus] = None
    address: OptionalText = None


class StaffOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    identifier: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    address: Optional[str] = None
    position: str
    department: str
    hire_date: date
    status: StaffStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StaffStats(BaseModel):
    """
    Estadísticas del personal.

    Attributes:
        total (int): Total de empleados
        active (int): Empleados activos
        inactive (int): Empleados inactivos
        active_rate (int): Porcentaje de activos (0 sin empleados)
        departments (Dict[str, int]): Empleados por departamento
    """
    total: int
    active: int
    inactive: int
    active_rate: int
    departments: Dict[str, int]
