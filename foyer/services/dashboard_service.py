"""
Agregados del dashboard, calculados con COUNT/SUM en la base de datos
en cada petición.
"""
from __future__ import annotations

from sqlalchemy import select, func, case, distinct
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.models import Room, Resident, Staff
from foyer.schemas import (
    DashboardStats, QuickStats, RoomBlock, CapacityBlock, ResidentBlock, StaffBlock, Alert, FreeRoom,
)
from foyer.services.derivations import percentage

CAPACITY_ALERT_THRESHOLD = 90


class DashboardService:
    """Estadísticas del dashboard"""

    @staticmethod
    async def _room_counts(db: AsyncSession) -> tuple[int, int]:
        total = await db.scalar(select(func.count(Room.id))) or 0
        occupied = await db.scalar(
            select(func.count(distinct(Resident.room_id))).where(Resident.room_id.is_not(None))
        ) or 0
        return total, occupied

    @staticmethod
    async def stats(db: AsyncSession) -> DashboardStats:
        total_rooms, occupied_rooms = await DashboardService._room_counts(db)
        rate = percentage(occupied_rooms, total_rooms)

        occupied_ids = select(Resident.room_id).where(Resident.room_id.is_not(None))
        free_rooms = (
            await db.execute(
                select(Room.id, Room.number)
                .where(Room.id.not_in(occupied_ids))
                .order_by(Room.floor, Room.number)
            )
        ).all()

        capacity_row = (
            await db.execute(
                select(
                    func.coalesce(func.sum(Room.capacity), 0),
                    func.coalesce(func.sum(Room.bed_count), 0),
                )
            )
        ).one()

        resident_row = (
            await db.execute(
                select(
                    func.count(Resident.id),
                    func.sum(case((Resident.gender == "male", 1), else_=0)),
                    func.sum(case((Resident.gender == "female", 1), else_=0)),
                    func.sum(case((Resident.type == "internal", 1), else_=0)),
                    func.sum(case((Resident.type == "external", 1), else_=0)),
                    func.sum(case((Resident.room_id.is_not(None), 1), else_=0)),
                )
            )
        ).one()
        total_residents, male, female, internal, external, with_room = (value or 0 for value in resident_row)

        total_staff = await db.scalar(select(func.count(Staff.id))) or 0
        active_staff = await db.scalar(select(func.count(Staff.id)).where(Staff.status == "active")) or 0

        total_capacity, total_beds = capacity_row
        alerts = []
        if rate > CAPACITY_ALERT_THRESHOLD:
            alerts.append(Alert(
                id="capacity-alert",
                type="warning",
                message="Capacité d'hébergement presque atteinte",
            ))

        return DashboardStats(
            rooms=RoomBlock(
                total=total_rooms,
                available=total_rooms - occupied_rooms,
                occupied=occupied_rooms,
                occupancy_rate=rate,
                free_rooms=[FreeRoom(id=room_id, number=number) for room_id, number in free_rooms],
            ),
            capacity=CapacityBlock(
                total_capacity=total_capacity,
                total_beds=total_beds,
                total_occupants=with_room,
                available_places=max(total_capacity - with_room, 0),
            ),
            residents=ResidentBlock(
                total=total_residents,
                male=male,
                female=female,
                internal=internal,
                external=external,
                with_room=with_room,
                without_room=total_residents - with_room,
            ),
            staff=StaffBlock(total=total_staff, active=active_staff, inactive=total_staff - active_staff),
            alerts=alerts,
        )

    @staticmethod
    async def quick_stats(db: AsyncSession) -> QuickStats:
        total_rooms, occupied_rooms = await DashboardService._room_counts(db)
        total_residents = await db.scalar(select(func.count(Resident.id))) or 0
        without_room = await db.scalar(select(func.count(Resident.id)).where(Resident.room_id.is_(None))) or 0
        total_staff = await db.scalar(select(func.count(Staff.id))) or 0
        return QuickStats(
            total_rooms=total_rooms,
            available_rooms=total_rooms - occupied_rooms,
            occupancy_rate=percentage(occupied_rooms, total_rooms),
            total_residents=total_residents,
            residents_without_room=without_room,
            total_staff=total_staff,
        )
