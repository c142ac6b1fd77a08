# =====================================================================
# ESQUEMAS DE HORARIOS DEL PERSONAL
# =====================================================================

from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import Weekday
from .validators import OptionalText

from foyer.models.schedule import MAX_SHIFT_HOURS

# =========================================================
# ESQUEMAS DE TURNOS
# =========================================================

class ScheduleDayIn(BaseModel):
    """
    Turno de un día. Un día libre no lleva horas ni tareas; un día trabajado
    necesita ``start_hour`` < ``end_hour`` con un máximo de 12 horas.
    """
    is_day_off: bool = False
    start_hour: Optional[int] = Field(None, ge=0, le=23)
    end_hour: Optional[int] = Field(None, ge=0, le=23)
    tasks: OptionalText = None
    notes: OptionalText = None

    @model_validator(mode="after")
    def _check_hours(self):
        if self.is_day_off:
            if self.start_hour is not None or self.end_hour is not None or self.tasks:
                raise ValueError("Un jour de repos ne peut pas avoir d'horaires ni de tâches")
            return self
        if self.start_hour is None or self.end_hour is None:
            raise ValueError("Les heures de début et de fin sont requises")
        if self.end_hour <= self.start_hour:
            raise ValueError("L'heure de fin doit être postérieure à l'heure de début")
        if self.end_hour - self.start_hour > MAX_SHIFT_HOURS:
            raise ValueError(f"Un service ne peut pas dépasser {MAX_SHIFT_HOURS} heures")
        return self


class ScheduleWeekItem(ScheduleDayIn):
    weekday: Weekday


class ScheduleWeekIn(BaseModel):
    """Semana completa de un empleado: reemplaza todos sus turnos."""
    days: List[ScheduleWeekItem]

    @model_validator(mode="after")
    def _unique_days(self):
        weekdays = [day.weekday for day in self.days]
        if len(weekdays) != len(set(weekdays)):
            raise ValueError("Chaque jour ne peut apparaître qu'une seule fois")
        return self


class ScheduleEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    staff_id: str
    weekday: Weekday
    is_day_off: bool
    start_hour: Optional[int] = None
    end_hour: Optional[int] = None
    hours: int
    tasks: Optional[str] = None
    notes: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class StaffScheduleOut(BaseModel):
    """Semana de un empleado con sus horas totales."""
    staff_id: str
    full_name: str
    department: str
    entries: List[ScheduleEntryOut]
    total_hours: int
    days_off: int


class ScheduleSummary(BaseModel):
    """
    Resumen global de la planificación.

    Attributes:
        staff_scheduled (int): Empleados con al menos un turno registrado
        total_hours (int): Horas planificadas en la semana
        coverage (dict): Empleados trabajando por día de la semana
    """
    staff_scheduled: int
    total_hours: int
    coverage: dict
