"""
CRUD de chambres. ``floor`` y ``bed_count`` se recalculan en cada escritura.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select, func, case, update, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.config import settings
from foyer.exceptions import ValidationError, CapacityError, UniquenessConflict
from foyer.models import Room, Resident
from foyer.schemas import RoomCreate, RoomUpdate, RoomOut, RoomGroupStats, RoomOverallStats, RoomStatistics
from foyer.security import new_uuid
from foyer.services.derivations import floor_from_room_number, bed_count_for, is_gender_compatible
from foyer.services.occupancy_service import OccupancyService, build_room_out, gender_mismatch_message

logger = logging.getLogger(__name__)

ROOM_STATUS_ALIASES = {
    "available": "available",
    "libre": "available",
    "disponible": "available",
    "occupied": "occupied",
    "occupee": "occupied",
    "occupée": "occupied",
}

ROOM_GENDER_ALIASES = {
    "boys": "boys",
    "garcon": "boys",
    "garçon": "boys",
    "girls": "girls",
    "fille": "girls",
    "mixed": "mixed",
    "mixte": "mixed",
}

ROOM_SORT_FIELDS = {
    "number": Room.number,
    "floor": Room.floor,
    "capacity": Room.capacity,
    "created_at": Room.created_at,
    "createdAt": Room.created_at,
}


def _normalize_filter(value: Optional[str], aliases: dict, label: str) -> Optional[str]:
    if value is None or value.strip().lower() in ("", "all"):
        return None
    normalized = aliases.get(value.strip().lower())
    if normalized is None:
        raise ValidationError(f"{label} inconnu: {value}")
    return normalized


class RoomService:
    """Gestión de chambres"""

    @staticmethod
    async def _check_number_free(db: AsyncSession, number: str, exclude_id: Optional[str] = None) -> None:
        query = select(Room.id).where(func.lower(Room.number) == number.lower())
        if exclude_id:
            query = query.where(Room.id != exclude_id)
        if await db.scalar(query) is not None:
            raise UniquenessConflict("number", "Une chambre avec ce numéro existe déjà")

    @staticmethod
    async def list_rooms(
        db: AsyncSession,
        status: Optional[str] = None,
        gender: Optional[str] = None,
        floor: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[RoomOut]:
        status = _normalize_filter(status, ROOM_STATUS_ALIASES, "Statut")
        gender = _normalize_filter(gender, ROOM_GENDER_ALIASES, "Type de chambre")

        query = select(Room)
        if gender:
            query = query.where(Room.gender == gender)
        if floor is not None:
            query = query.where(Room.floor == floor)
        if search:
            query = query.where(Room.number.icontains(search.strip(), autoescape=True))
        if status:
            occupied_ids = select(Resident.room_id).where(Resident.room_id.is_not(None))
            if status == "occupied":
                query = query.where(Room.id.in_(occupied_ids))
            else:
                query = query.where(Room.id.not_in(occupied_ids))

        if sort_by:
            column = ROOM_SORT_FIELDS.get(sort_by)
            if column is None:
                raise ValidationError(f"Tri impossible sur le champ: {sort_by}")
            direction = desc if sort_order == "desc" else asc
            query = query.order_by(direction(column), Room.number)
        else:
            query = query.order_by(Room.floor, Room.number)

        rooms = (await db.execute(query)).scalars().all()
        occupants = await OccupancyService.occupants_by_room(db, [room.id for room in rooms])
        return [build_room_out(room, occupants[room.id]) for room in rooms]

    @staticmethod
    async def get_room(db: AsyncSession, room_id: str) -> RoomOut:
        room = await OccupancyService.get_room_or_404(db, room_id)
        occupants = await OccupancyService.list_occupants(db, room.id)
        return build_room_out(room, occupants)

    @staticmethod
    async def create_room(db: AsyncSession, payload: RoomCreate) -> RoomOut:
        await RoomService._check_number_free(db, payload.number)
        room = Room(
            id=new_uuid(),
            number=payload.number,
            capacity=payload.capacity,
            bed_count=bed_count_for(payload.capacity),
            floor=floor_from_room_number(payload.number),
            gender=payload.gender,
            room_type=payload.room_type,
            description=payload.description,
            amenities=payload.amenities,
            is_active=payload.is_active,
        )
        db.add(room)
        await db.commit()
        await db.refresh(room)
        logger.info(f"Chambre {room.number} créée", extra={"room_id": room.id, "floor": room.floor})
        return build_room_out(room, [])

    @staticmethod
    async def update_room(db: AsyncSession, room_id: str, payload: RoomUpdate) -> RoomOut:
        room = await OccupancyService.get_room_or_404(db, room_id, lock=True)
        data = payload.model_dump(exclude_unset=True)
        occupants = await OccupancyService.list_occupants(db, room.id)

        if "number" in data and data["number"] is not None:
            await RoomService._check_number_free(db, data["number"], exclude_id=room.id)

        capacity = data.get("capacity") or room.capacity
        if capacity < len(occupants):
            raise CapacityError(
                f"La capacité ne peut pas être inférieure au nombre d'occupants actuel ({len(occupants)})"
            )

        gender = data.get("gender") or room.gender
        if gender != room.gender and settings.enforce_room_gender:
            for resident in occupants:
                if not is_gender_compatible(gender, resident.gender):
                    raise ValidationError(gender_mismatch_message(room, resident))

        for key, value in data.items():
            if value is None and key != "description":
                continue
            setattr(room, key, value)
        room.floor = floor_from_room_number(room.number)
        room.bed_count = bed_count_for(room.capacity)

        await db.commit()
        await db.refresh(room)
        return build_room_out(room, occupants)

    @staticmethod
    async def delete_room(db: AsyncSession, room_id: str) -> None:
        """Borra la chambre y desvincula a sus ocupantes en la misma transacción."""
        room = await OccupancyService.get_room_or_404(db, room_id, lock=True)
        result = await db.execute(
            update(Resident)
            .where(Resident.room_id == room.id)
            .values(room_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await db.delete(room)
        await db.commit()
        logger.info(
            f"Chambre {room.number} supprimée",
            extra={"room_id": room.id, "released_occupants": result.rowcount},
        )

    @staticmethod
    async def statistics(db: AsyncSession) -> RoomStatistics:
        """Totales agrupados por sexo de chambre y globales."""
        counts = (
            select(Resident.room_id.label("room_id"), func.count(Resident.id).label("occupants"))
            .where(Resident.room_id.is_not(None))
            .group_by(Resident.room_id)
            .subquery()
        )
        occupants = func.coalesce(counts.c.occupants, 0)
        result = await db.execute(
            select(
                Room.gender,
                func.count(Room.id),
                func.coalesce(func.sum(Room.capacity), 0),
                func.coalesce(func.sum(occupants), 0),
                func.sum(case((occupants < Room.capacity, 1), else_=0)),
                func.sum(case((occupants > 0, 1), else_=0)),
            )
            .select_from(Room)
            .outerjoin(counts, counts.c.room_id == Room.id)
            .group_by(Room.gender)
            .order_by(Room.gender)
        )
        by_gender = [
            RoomGroupStats(
                gender=gender,
                total_rooms=total,
                total_capacity=capacity,
                total_occupants=occupied_places,
                rooms_with_space=with_space or 0,
                occupied_rooms=occupied or 0,
            )
            for gender, total, capacity, occupied_places, with_space, occupied in result.all()
        ]

        total_rooms = sum(group.total_rooms for group in by_gender)
        total_capacity = sum(group.total_capacity for group in by_gender)
        total_occupants = sum(group.total_occupants for group in by_gender)
        average = await db.scalar(
            select(func.avg(occupants * 1.0 / Room.capacity))
            .select_from(Room)
            .outerjoin(counts, counts.c.room_id == Room.id)
        )
        return RoomStatistics(
            by_gender=by_gender,
            overall=RoomOverallStats(
                total_rooms=total_rooms,
                total_capacity=total_capacity,
                total_occupants=total_occupants,
                average_occupancy=round(float(average or 0), 4),
            ),
        )
