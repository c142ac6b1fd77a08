"""
Planificación semanal del personal: una fila por (empleado, día).
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.exceptions import NotFoundError, ValidationError
from foyer.models import ScheduleEntry, Staff, WEEKDAYS
from foyer.schemas import ScheduleDayIn, ScheduleWeekIn, ScheduleEntryOut, StaffScheduleOut, ScheduleSummary
from foyer.security import new_uuid
from foyer.services.staff_service import StaffService

logger = logging.getLogger(__name__)


def _weekday_order(entry: ScheduleEntry) -> int:
    return WEEKDAYS.index(entry.weekday)


def _apply_day(entry: ScheduleEntry, day: ScheduleDayIn, user_id: Optional[str]) -> None:
    entry.is_day_off = day.is_day_off
    entry.start_hour = None if day.is_day_off else day.start_hour
    entry.end_hour = None if day.is_day_off else day.end_hour
    entry.tasks = None if day.is_day_off else day.tasks
    entry.notes = day.notes
    entry.updated_by = user_id


def _entry_out(entry: ScheduleEntry) -> ScheduleEntryOut:
    return ScheduleEntryOut.model_validate(entry)


def _week_out(staff: Staff, entries: List[ScheduleEntry]) -> StaffScheduleOut:
    entries = sorted(entries, key=_weekday_order)
    return StaffScheduleOut(
        staff_id=staff.id,
        full_name=staff.full_name,
        department=staff.department,
        entries=[_entry_out(e) for e in entries],
        total_hours=sum(e.hours for e in entries),
        days_off=sum(1 for e in entries if e.is_day_off),
    )


def _check_weekday(weekday: str) -> str:
    weekday = weekday.strip().lower()
    if weekday not in WEEKDAYS:
        raise ValidationError(f"Jour inconnu: {weekday}")
    return weekday


class ScheduleService:
    """Turnos del personal"""

    @staticmethod
    async def _entries_for(db: AsyncSession, staff_id: str) -> List[ScheduleEntry]:
        result = await db.execute(
            select(ScheduleEntry)
            .where(ScheduleEntry.staff_id == staff_id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    async def _schedulable_staff(db: AsyncSession, staff_id: str) -> Staff:
        staff = await StaffService.get_staff_or_404(db, staff_id)
        if not staff.is_active:
            raise ValidationError("Un employé inactif ne peut pas être planifié")
        return staff

    @staticmethod
    async def list_entries(
        db: AsyncSession,
        weekday: Optional[str] = None,
        department: Optional[str] = None,
    ) -> List[ScheduleEntryOut]:
        query = select(ScheduleEntry).join(Staff, Staff.id == ScheduleEntry.staff_id)
        if weekday and weekday != "all":
            query = query.where(ScheduleEntry.weekday == _check_weekday(weekday))
        if department and department != "all":
            query = query.where(Staff.department == department)
        entries = (await db.execute(query.order_by(Staff.last_name, Staff.first_name))).scalars().all()
        return [_entry_out(e) for e in sorted(entries, key=_weekday_order)]

    @staticmethod
    async def staff_week(db: AsyncSession, staff_id: str) -> StaffScheduleOut:
        staff = await StaffService.get_staff_or_404(db, staff_id)
        return _week_out(staff, await ScheduleService._entries_for(db, staff.id))

    @staticmethod
    async def replace_week(
        db: AsyncSession, staff_id: str, payload: ScheduleWeekIn, user_id: Optional[str] = None,
    ) -> StaffScheduleOut:
        """Sustituye la semana completa del empleado; los días no enviados se borran."""
        staff = await ScheduleService._schedulable_staff(db, staff_id)
        await db.execute(delete(ScheduleEntry).where(ScheduleEntry.staff_id == staff.id))
        entries = []
        for day in payload.days:
            entry = ScheduleEntry(id=new_uuid(), staff_id=staff.id, weekday=day.weekday)
            _apply_day(entry, day, user_id)
            db.add(entry)
            entries.append(entry)
        await db.commit()
        logger.info(f"Planning de {staff.identifier} remplacé", extra={"staff_id": staff.id, "days": len(entries)})
        return _week_out(staff, await ScheduleService._entries_for(db, staff.id))

    @staticmethod
    async def upsert_day(
        db: AsyncSession, staff_id: str, weekday: str, payload: ScheduleDayIn, user_id: Optional[str] = None,
    ) -> ScheduleEntryOut:
        weekday = _check_weekday(weekday)
        staff = await ScheduleService._schedulable_staff(db, staff_id)
        entry = await db.scalar(
            select(ScheduleEntry).where(ScheduleEntry.staff_id == staff.id, ScheduleEntry.weekday == weekday)
        )
        if entry is None:
            entry = ScheduleEntry(id=new_uuid(), staff_id=staff.id, weekday=weekday)
            db.add(entry)
        _apply_day(entry, payload, user_id)
        await db.commit()
        await db.refresh(entry)
        return _entry_out(entry)

    @staticmethod
    async def delete_day(db: AsyncSession, staff_id: str, weekday: str) -> None:
        weekday = _check_weekday(weekday)
        staff = await StaffService.get_staff_or_404(db, staff_id)
        entry = await db.scalar(
            select(ScheduleEntry).where(ScheduleEntry.staff_id == staff.id, ScheduleEntry.weekday == weekday)
        )
        if entry is None:
            raise NotFoundError("Aucun horaire pour ce jour")
        await db.delete(entry)
        await db.commit()

    @staticmethod
    async def summary(db: AsyncSession) -> ScheduleSummary:
        """Horas totales y cobertura (empleados trabajando) por día."""
        entries = (await db.execute(select(ScheduleEntry))).scalars().all()
        coverage = {day: 0 for day in WEEKDAYS}
        for entry in entries:
            if not entry.is_day_off:
                coverage[entry.weekday] += 1
        return ScheduleSummary(
            staff_scheduled=len({e.staff_id for e in entries}),
            total_hours=sum(e.hours for e in entries),
            coverage=coverage,
        )
