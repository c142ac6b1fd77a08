"""
Gestión del personal del foyer.
"""
from __future__ import annotations

import logging
import random
from datetime import date
from typing import List, Optional

from sqlalchemy import select, func, or_, delete
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.exceptions import CONSTRAINT_MESSAGES, NotFoundError, UniquenessConflict, ValidationError
from foyer.models import Staff, ScheduleEntry
from foyer.schemas import StaffCreate, StaffUpdate, StaffOut, StaffStats
from foyer.security import new_uuid, is_valid_uuid
from foyer.services.derivations import percentage
from foyer.services.identifiers import generate_staff_identifier

logger = logging.getLogger(__name__)

STAFF_SEARCH_COLUMNS = (Staff.first_name, Staff.last_name, Staff.email, Staff.position, Staff.department)


def _conflict(constraint: str) -> UniquenessConflict:
    field, message = CONSTRAINT_MESSAGES[constraint]
    return UniquenessConflict(field, message)


class StaffService:
    """CRUD y estadísticas del personal"""

    @staticmethod
    async def get_staff_or_404(db: AsyncSession, staff_id: str) -> Staff:
        if not is_valid_uuid(staff_id):
            raise NotFoundError("Employé non trouvé")
        staff = await db.get(Staff, staff_id)
        if staff is None:
            raise NotFoundError("Employé non trouvé")
        return staff

    @staticmethod
    async def _check_unique(db: AsyncSession, staff: Staff) -> None:
        """Email, teléfono, identificador y (nombre, apellido, fecha de contratación)."""
        checks = (
            ("uq_staff_email", Staff.email == staff.email),
            ("uq_staff_phone", Staff.phone == staff.phone),
            ("uq_staff_identifier", Staff.identifier == staff.identifier),
            (
                "uq_staff_name_hire_date",
                (Staff.first_name == staff.first_name)
                & (Staff.last_name == staff.last_name)
                & (Staff.hire_date == staff.hire_date),
            ),
        )
        for constraint, condition in checks:
            query = select(Staff.id).where(condition)
            if staff.id:
                query = query.where(Staff.id != staff.id)
            if await db.scalar(query) is not None:
                raise _conflict(constraint)

    @staticmethod
    async def list_staff(
        db: AsyncSession,
        status: Optional[str] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[StaffOut]:
        query = select(Staff)
        if status and status != "all":
            if status not in ("active", "inactive"):
                raise ValidationError(f"Statut inconnu: {status}")
            query = query.where(Staff.status == status)
        if department and department != "all":
            query = query.where(Staff.department == department)
        if start_date:
            query = query.where(Staff.hire_date >= start_date)
        if end_date:
            query = query.where(Staff.hire_date <= end_date)
        if search:
            term = search.strip()
            query = query.where(or_(*(c.icontains(term, autoescape=True) for c in STAFF_SEARCH_COLUMNS)))

        result = await db.execute(query.order_by(Staff.created_at.desc(), Staff.id))
        return [StaffOut.model_validate(s) for s in result.scalars().all()]

    @staticmethod
    async def create(db: AsyncSession, payload: StaffCreate, rng: random.Random | None = None) -> StaffOut:
        data = payload.model_dump()
        staff = Staff(id=None, **data)
        staff.full_name = f"{staff.first_name} {staff.last_name}"
        if not staff.identifier:
            staff.identifier = await generate_staff_identifier(db, year=date.today().year, rng=rng)
        await StaffService._check_unique(db, staff)

        staff.id = new_uuid()
        db.add(staff)
        await db.commit()
        await db.refresh(staff)
        logger.info(f"Employé {staff.identifier} créé", extra={"staff_id": staff.id})
        return StaffOut.model_validate(staff)

    @staticmethod
    async def update(db: AsyncSession, staff_id: str, payload: StaffUpdate) -> StaffOut:
        staff = await StaffService.get_staff_or_404(db, staff_id)
        data = payload.model_dump(exclude_unset=True)
        for key, value in data.items():
            if value is None and key != "address":
                continue
            setattr(staff, key, value)
        staff.full_name = f"{staff.first_name} {staff.last_name}"

        with db.no_autoflush:
            await StaffService._check_unique(db, staff)
        await db.commit()
        await db.refresh(staff)
        return StaffOut.model_validate(staff)

    @staticmethod
    async def delete(db: AsyncSession, staff_id: str) -> None:
        """Borra al empleado junto con sus turnos."""
        staff = await StaffService.get_staff_or_404(db, staff_id)
        await db.execute(delete(ScheduleEntry).where(ScheduleEntry.staff_id == staff.id))
        await db.delete(staff)
        await db.commit()
        logger.info(f"Employé {staff.identifier} supprimé", extra={"staff_id": staff_id})

    @staticmethod
    async def stats(db: AsyncSession) -> StaffStats:
        total = await db.scalar(select(func.count(Staff.id))) or 0
        active = await db.scalar(select(func.count(Staff.id)).where(Staff.status == "active")) or 0
        result = await db.execute(
            select(Staff.department, func.count(Staff.id))
            .group_by(Staff.department)
            .order_by(func.count(Staff.id).desc(), Staff.department)
        )
        return StaffStats(
            total=total,
            active=active,
            inactive=total - active,
            active_rate=percentage(active, total),
            departments={department: count for department, count in result.all()},
        )
