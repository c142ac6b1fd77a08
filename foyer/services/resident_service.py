"""
CRUD de stagiaires: identificador, ciclo y total pagado se derivan aquí
antes de cada escritura.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.exceptions import CONSTRAINT_MESSAGES, NotFoundError, UniquenessConflict, ValidationError
from foyer.models import Resident, Room
from foyer.schemas import (
    ResidentCreate, ResidentUpdate, ResidentOut, ResidentSummary, ResidentFilters,
    LodgingPayment, RegistrationPayment,
)
from foyer.security import new_uuid, is_valid_uuid
from foyer.services.counter import SequenceCounter, SqlSequenceCounter
from foyer.services.derivations import (
    normalize_cycle, check_resident_state, total_amount_of, EXTERNAL_CYCLE,
)
from foyer.services.identifiers import next_resident_identifier
from foyer.services.occupancy_service import OccupancyService
from foyer.services.resident_query import build_resident_predicate, resident_order_by

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("email", "identifier", "telephone", "phone_number", "cin_number")
LEDGER_FIELDS = ("lodging", "registration")


def _apply_lodging(resident: Resident, lodging: LodgingPayment) -> None:
    resident.lodging_enabled = lodging.enabled
    resident.lodging_status = lodging.status
    resident.lodging_term1_price = lodging.term1_price
    resident.lodging_term2_price = lodging.term2_price
    resident.lodging_term3_price = lodging.term3_price


def _apply_registration(resident: Resident, registration: RegistrationPayment) -> None:
    resident.registration_enabled = registration.enabled
    resident.registration_status = registration.status
    resident.registration_price = registration.price


class ResidentService:
    """Gestión de stagiaires"""

    # ---------- Helpers ----------

    @staticmethod
    async def get_resident_or_404(db: AsyncSession, resident_id: str) -> Resident:
        if not is_valid_uuid(resident_id):
            raise NotFoundError("Stagiaire non trouvé")
        resident = await db.get(Resident, resident_id)
        if resident is None:
            raise NotFoundError("Stagiaire non trouvé")
        return resident

    @staticmethod
    async def _check_unique(db: AsyncSession, values: Dict, exclude_id: Optional[str] = None) -> None:
        for field in UNIQUE_FIELDS:
            value = values.get(field)
            if value is None:
                continue
            query = select(Resident.id).where(getattr(Resident, field) == value)
            if exclude_id:
                query = query.where(Resident.id != exclude_id)
            if await db.scalar(query) is not None:
                field_name, message = CONSTRAINT_MESSAGES[f"uq_resident_{field}"]
                raise UniquenessConflict(field_name, message)

    @staticmethod
    async def _rooms_for(db: AsyncSession, residents: List[Resident]) -> Dict[str, Room]:
        room_ids = {r.room_id for r in residents if r.room_id}
        if not room_ids:
            return {}
        result = await db.execute(select(Room).where(Room.id.in_(room_ids)))
        return {room.id: room for room in result.scalars().all()}

    @staticmethod
    async def to_out(db: AsyncSession, resident: Resident) -> ResidentOut:
        room = await db.get(Room, resident.room_id) if resident.room_id else None
        return ResidentOut.from_model(resident, room)

    # ---------- Consultas ----------

    @staticmethod
    async def list_residents(db: AsyncSession, filters: ResidentFilters, today: Optional[date] = None) -> List[ResidentOut]:
        today = today or date.today()
        query = (
            select(Resident)
            .where(build_resident_predicate(filters, today))
            .order_by(*resident_order_by(filters))
        )
        residents = list((await db.execute(query)).scalars().all())
        rooms = await ResidentService._rooms_for(db, residents)
        return [ResidentOut.from_model(r, rooms.get(r.room_id)) for r in residents]

    @staticmethod
    async def search(db: AsyncSession, term: str) -> List[ResidentOut]:
        return await ResidentService.list_residents(db, ResidentFilters(search=term))

    @staticmethod
    async def available(db: AsyncSession, search: Optional[str] = None, without_room: bool = True) -> List[ResidentSummary]:
        """Stagiaires internos para los selectores de asignación."""
        filters = ResidentFilters(
            search=search or None,
            room="withoutRoom" if without_room else None,
            type="internal",
            sort_by="first_name",
            sort_order="asc",
        )
        query = (
            select(Resident)
            .where(build_resident_predicate(filters, date.today()))
            .order_by(*resident_order_by(filters))
        )
        residents = (await db.execute(query)).scalars().all()
        return [ResidentSummary.model_validate(r) for r in residents]

    @staticmethod
    async def get(db: AsyncSession, resident_id: str) -> ResidentOut:
        resident = await ResidentService.get_resident_or_404(db, resident_id)
        return await ResidentService.to_out(db, resident)

    # ---------- Escritura ----------

    @staticmethod
    async def create(
        db: AsyncSession,
        payload: ResidentCreate,
        force_type: Optional[str] = None,
        counter: Optional[SequenceCounter] = None,
    ) -> ResidentOut:
        """
        Alta de un stagiaire. ``force_type`` fija el tipo (rutas /intern y /extern).
        El identificador se genera con la secuencia global si no se envía.
        """
        data = payload.model_dump(exclude=set(LEDGER_FIELDS))
        data["type"] = force_type or payload.type

        cycle = normalize_cycle(data.pop("cycle"))
        data["cycle"] = check_resident_state(
            data["type"], cycle, data["session_year"], data["arrival_date"], data["departure_date"],
        )
        await ResidentService._check_unique(db, data)

        room_id = data.pop("room_id")
        identifier = data.pop("identifier")
        resident = Resident(id=new_uuid(), **data)
        _apply_lodging(resident, payload.lodging or LodgingPayment())
        _apply_registration(resident, payload.registration or RegistrationPayment())
        resident.total_amount = total_amount_of(resident)

        try:
            if room_id:
                await OccupancyService.validate_single_link(db, resident, room_id)
                resident.room_id = room_id

            resident.identifier = identifier or await next_resident_identifier(
                db,
                counter or SqlSequenceCounter(db),
                resident.type,
                resident.cycle,
                resident.session_year,
                resident.arrival_date,
            )
            db.add(resident)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(resident)
        logger.info(
            f"Stagiaire {resident.identifier} créé",
            extra={"resident_id": resident.id, "type": resident.type, "room_id": resident.room_id},
        )
        return await ResidentService.to_out(db, resident)

    @staticmethod
    async def update(db: AsyncSession, resident_id: str, payload: ResidentUpdate) -> ResidentOut:
        """Actualización parcial; se recalculan ciclo y total pagado."""
        resident = await ResidentService.get_resident_or_404(db, resident_id)
        data = payload.model_dump(exclude_unset=True, exclude=set(LEDGER_FIELDS))

        for required in ("first_name", "last_name", "email", "gender", "arrival_date", "type"):
            if required in data and data[required] is None:
                raise ValidationError(f"Le champ {required} ne peut pas être vide")

        await ResidentService._check_unique(db, data, exclude_id=resident.id)

        new_type = data.pop("type", None) or resident.type
        if "cycle" in data:
            cycle = normalize_cycle(data.pop("cycle"))
        else:
            cycle = None if resident.cycle == EXTERNAL_CYCLE else resident.cycle
        session_year = data.pop("session_year") if "session_year" in data else resident.session_year
        arrival_date = data.pop("arrival_date", None) or resident.arrival_date
        departure_date = data.pop("departure_date") if "departure_date" in data else resident.departure_date

        resident.cycle = check_resident_state(new_type, cycle, session_year, arrival_date, departure_date)
        resident.type = new_type
        resident.session_year = session_year
        resident.arrival_date = arrival_date
        resident.departure_date = departure_date

        room_changed = "room_id" in data
        new_room_id = data.pop("room_id", None) if room_changed else resident.room_id
        gender_changed = "gender" in data and data["gender"] != resident.gender

        for key, value in data.items():
            setattr(resident, key, value)

        if payload.lodging is not None:
            _apply_lodging(resident, payload.lodging)
        if payload.registration is not None:
            _apply_registration(resident, payload.registration)
        resident.total_amount = total_amount_of(resident)

        try:
            if new_room_id and (new_room_id != resident.room_id):
                await OccupancyService.validate_single_link(db, resident, new_room_id)
            elif new_room_id:
                OccupancyService.check_can_be_housed(resident)
                if gender_changed:
                    room = await OccupancyService.get_room_or_404(db, new_room_id)
                    OccupancyService.check_gender(room, [resident])
            resident.room_id = new_room_id
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(resident)
        return await ResidentService.to_out(db, resident)

    @staticmethod
    async def delete(db: AsyncSession, resident_id: str) -> None:
        """Al borrar el stagiaire desaparece de los ocupantes de su chambre."""
        resident = await ResidentService.get_resident_or_404(db, resident_id)
        await db.delete(resident)
        await db.commit()
        logger.info(f"Stagiaire {resident.identifier} supprimé", extra={"resident_id": resident_id})
