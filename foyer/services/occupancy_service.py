"""
Servicio de ocupación: vincula stagiaires a chambres.

``Resident.room_id`` es la única fuente de verdad; los ocupantes de una
chambre se calculan siempre a partir de ella.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.config import settings
from foyer.exceptions import ValidationError, CapacityError, NotFoundError
from foyer.models import Room, Resident
from foyer.schemas import (
    RoomOut, ResidentSummary, OccupantConflict, ConflictReport, RoomInfo, AvailableResidentsOut,
)
from foyer.security import is_valid_uuid
from foyer.services.derivations import (
    room_status, percentage, is_gender_compatible, ROOM_GENDER_RULES,
)

logger = logging.getLogger(__name__)


@dataclass
class AssignmentOutcome:
    room: Room
    occupants: List[Resident]
    added_count: int = 0
    removed_count: int = 0
    warnings: List[str] = field(default_factory=list)


def build_room_out(room: Room, occupants: List[Resident]) -> RoomOut:
    """Chambre con su estado y ocupación derivados de la lista de ocupantes."""
    count = len(occupants)
    return RoomOut(
        id=room.id,
        number=room.number,
        capacity=room.capacity,
        bed_count=room.bed_count,
        floor=room.floor,
        gender=room.gender,
        room_type=room.room_type,
        description=room.description,
        amenities=room.amenities or [],
        is_active=room.is_active,
        status=room_status(count),
        occupant_count=count,
        available_places=max(room.capacity - count, 0),
        occupancy_rate=percentage(count, room.capacity),
        occupants=[ResidentSummary.model_validate(r) for r in occupants],
        created_at=room.created_at,
        updated_at=room.updated_at,
    )


def gender_mismatch_message(room: Room, resident: Resident) -> str:
    return (
        f"{resident.full_name} ({resident.gender}) n'est pas compatible "
        f"avec la chambre {room.number} ({room.gender})"
    )


class OccupancyService:
    """Asignación de ocupantes y consultas de ocupación"""

    # ---------- Consultas ----------

    @staticmethod
    async def get_room_or_404(db: AsyncSession, room_id: str, lock: bool = False) -> Room:
        if not is_valid_uuid(room_id):
            raise NotFoundError("Chambre non trouvée")
        query = select(Room).where(Room.id == room_id)
        if lock:
            query = query.with_for_update()
        room = await db.scalar(query)
        if room is None:
            raise NotFoundError("Chambre non trouvée")
        return room

    @staticmethod
    async def list_occupants(db: AsyncSession, room_id: str) -> List[Resident]:
        result = await db.execute(
            select(Resident)
            .where(Resident.room_id == room_id)
            .order_by(Resident.last_name, Resident.first_name, Resident.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def occupants_by_room(db: AsyncSession, room_ids: Iterable[str]) -> Dict[str, List[Resident]]:
        """Ocupantes de varias chambres en una sola consulta."""
        room_ids = list(room_ids)
        grouped: Dict[str, List[Resident]] = {room_id: [] for room_id in room_ids}
        if not room_ids:
            return grouped
        result = await db.execute(
            select(Resident)
            .where(Resident.room_id.in_(room_ids))
            .order_by(Resident.last_name, Resident.first_name, Resident.id)
        )
        for resident in result.scalars().all():
            grouped[resident.room_id].append(resident)
        return grouped

    @staticmethod
    async def occupant_count(db: AsyncSession, room_id: str, exclude_resident_id: Optional[str] = None) -> int:
        query = select(func.count(Resident.id)).where(Resident.room_id == room_id)
        if exclude_resident_id:
            query = query.where(Resident.id != exclude_resident_id)
        return await db.scalar(query) or 0

    # ---------- Reglas ----------

    @staticmethod
    def check_gender(room: Room, residents: Iterable[Resident]) -> List[str]:
        """
        Devuelve los avisos de incompatibilidad. Si ENFORCE_ROOM_GENDER está
        activo, la primera incompatibilidad es un error.
        """
        warnings = []
        for resident in residents:
            if is_gender_compatible(room.gender, resident.gender):
                continue
            message = gender_mismatch_message(room, resident)
            if settings.enforce_room_gender:
                raise ValidationError(message)
            logger.warning(message, extra={"room_id": room.id, "resident_id": resident.id})
            warnings.append(message)
        return warnings

    @staticmethod
    def check_can_be_housed(resident: Resident) -> None:
        if resident.type == "external":
            raise ValidationError(
                f"{resident.full_name} est un stagiaire externe et ne peut pas être assigné à une chambre"
            )

    @staticmethod
    async def validate_single_link(db: AsyncSession, resident: Resident, room_id: str) -> List[str]:
        """
        Comprobaciones al fijar ``room_id`` desde el alta o la edición de un stagiaire:
        chambre existente, stagiaire interno, plaza libre y regla de sexo.
        """
        room = await OccupancyService.get_room_or_404(db, room_id, lock=True)
        OccupancyService.check_can_be_housed(resident)
        current = await OccupancyService.occupant_count(db, room.id, exclude_resident_id=resident.id)
        if current + 1 > room.capacity:
            raise CapacityError(f"La chambre {room.number} est complète (capacité {room.capacity})")
        return OccupancyService.check_gender(room, [resident])

    # ---------- Asignación ----------

    @staticmethod
    async def assign(db: AsyncSession, room_id: str, resident_ids) -> AssignmentOutcome:
        """
        Reemplaza la lista de ocupantes de una chambre por ``resident_ids``.

        Todo ocurre en una transacción con la fila de la chambre bloqueada;
        ante cualquier error no se modifica nada.
        """
        if not isinstance(resident_ids, list):
            raise ValidationError("La liste des occupants doit être un tableau")
        invalid = [rid for rid in resident_ids if not is_valid_uuid(rid)]
        if invalid:
            raise ValidationError(f"Identifiant de stagiaire invalide: {invalid[0]}")
        if len(set(resident_ids)) != len(resident_ids):
            raise ValidationError("Un stagiaire ne peut apparaître qu'une seule fois")

        try:
            room = await OccupancyService.get_room_or_404(db, room_id, lock=True)

            if len(resident_ids) > room.capacity:
                raise CapacityError(
                    f"La chambre {room.number} ne peut accueillir que {room.capacity} occupant(s)"
                )

            residents: List[Resident] = []
            if resident_ids:
                result = await db.execute(
                    select(Resident).where(Resident.id.in_(resident_ids)).with_for_update()
                )
                found = {r.id: r for r in result.scalars().all()}
                missing = [rid for rid in resident_ids if rid not in found]
                if missing:
                    raise NotFoundError(f"Stagiaire non trouvé: {missing[0]}")
                residents = [found[rid] for rid in resident_ids]

            for resident in residents:
                OccupancyService.check_can_be_housed(resident)
            warnings = OccupancyService.check_gender(room, residents)

            previous = await OccupancyService.list_occupants(db, room.id)
            wanted = set(resident_ids)

            removed_count = 0
            for resident in previous:
                if resident.id not in wanted:
                    resident.room_id = None
                    removed_count += 1

            added_count = 0
            for resident in residents:
                if resident.room_id != room.id:
                    if resident.room_id is not None:
                        logger.info(
                            f"Stagiaire {resident.identifier} déplacé vers la chambre {room.number}",
                            extra={"from_room_id": resident.room_id, "to_room_id": room.id},
                        )
                    resident.room_id = room.id
                    added_count += 1

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        occupants = await OccupancyService.list_occupants(db, room.id)
        logger.info(
            f"Chambre {room.number}: {added_count} ajouté(s), {removed_count} retiré(s)",
            extra={"room_id": room.id, "status": room_status(len(occupants))},
        )
        return AssignmentOutcome(
            room=room,
            occupants=occupants,
            added_count=added_count,
            removed_count=removed_count,
            warnings=warnings,
        )

    # ---------- Operaciones auxiliares ----------

    @staticmethod
    async def check_conflicts(db: AsyncSession, room_id: str, resident_ids: List[str]) -> ConflictReport:
        """Stagiaires de la lista que ya ocupan otra chambre."""
        ids = [rid for rid in resident_ids if is_valid_uuid(rid)]
        conflicts: List[OccupantConflict] = []
        if ids:
            result = await db.execute(
                select(Resident.id, Room.id, Room.number)
                .join(Room, Resident.room_id == Room.id)
                .where(Resident.id.in_(ids), Room.id != room_id)
                .order_by(Room.number, Resident.id)
            )
            conflicts = [
                OccupantConflict(resident_id=resident_id, room_id=other_room_id, room_number=number)
                for resident_id, other_room_id, number in result.all()
            ]
        return ConflictReport(conflicts=conflicts, has_conflicts=bool(conflicts))

    @staticmethod
    async def available_residents(db: AsyncSession, room_id: str) -> AvailableResidentsOut:
        """Internos sin chambre y compatibles con el sexo de la chambre."""
        room = await OccupancyService.get_room_or_404(db, room_id)
        query = select(Resident).where(Resident.type == "internal", Resident.room_id.is_(None))
        expected_gender = ROOM_GENDER_RULES.get(room.gender)
        if expected_gender is not None:
            query = query.where(Resident.gender == expected_gender)
        result = await db.execute(query.order_by(Resident.first_name, Resident.last_name, Resident.id))
        residents = result.scalars().all()

        current = await OccupancyService.occupant_count(db, room.id)
        return AvailableResidentsOut(
            residents=[ResidentSummary.model_validate(r) for r in residents],
            room=RoomInfo(
                number=room.number,
                gender=room.gender,
                capacity=room.capacity,
                current_occupants=current,
                available_places=max(room.capacity - current, 0),
            ),
        )
