#!/usr/bin/env python3
# =====================================================================
# SCRIPT DE SEEDS: PERSONAL, CHAMBRES Y HORARIOS
# =====================================================================
"""
Pobla la base de datos con datos de prueba para desarrollo.

Uso:
    python seed_personnel.py            # Añade personal, chambres y horarios
    python seed_personnel.py --reset    # Borra antes el personal y sus horarios
"""

import argparse
import asyncio
import random
from datetime import date

from sqlalchemy import delete, select

from foyer.db import AsyncSessionLocal, engine
from foyer.models import Room, ScheduleEntry, Staff
from foyer.schemas import RoomCreate, ScheduleWeekIn, ScheduleWeekItem, StaffCreate
from foyer.services.room_service import RoomService
from foyer.services.schedule_service import ScheduleService
from foyer.services.staff_service import StaffService

# =====================================================================
# DATOS DE PRUEBA
# =====================================================================

PERSONNEL = [
    {
        "first_name": "Martin",
        "last_name": "Dupont",
        "email": "martin.dupont@example.com",
        "phone": "+216 55 123 456",
        "position": "Directeur",
        "department": "Administration",
        "hire_date": date(2020, 1, 15),
        "address": "123 Rue de la Paix, Tunis",
    },
    {
        "first_name": "Sophie",
        "last_name": "Leclerc",
        "email": "sophie.leclerc@example.com",
        "phone": "+216 55 789 012",
        "position": "Responsable RH",
        "department": "Ressources Humaines",
        "hire_date": date(2021, 3, 10),
        "address": "45 Avenue Habib Bourguiba, Tunis",
    },
    {
        "first_name": "Karim",
        "last_name": "Ben Salah",
        "email": "karim.bensalah@example.com",
        "phone": "+216 55 345 678",
        "position": "Agent de sécurité",
        "department": "Sécurité",
        "hire_date": date(2022, 9, 1),
    },
    {
        "first_name": "Amira",
        "last_name": "Trabelsi",
        "email": "amira.trabelsi@example.com",
        "phone": "+216 55 901 234",
        "position": "Cheffe cuisinière",
        "department": "Restauration",
        "hire_date": date(2019, 11, 4),
    },
]

# (número, capacidad, sexo)
ROOMS = [
    ("101", 2, "boys"),
    ("102", 2, "boys"),
    ("103", 4, "boys"),
    ("201", 2, "girls"),
    ("202", 3, "girls"),
    ("301", 2, "mixed"),
]

WORK_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")

# =====================================================================
# SEEDS
# =====================================================================

def _week(start_hour: int) -> ScheduleWeekIn:
    days = [
        ScheduleWeekItem(weekday=day, start_hour=start_hour, end_hour=start_hour + 8)
        for day in WORK_DAYS
    ]
    days += [ScheduleWeekItem(weekday=day, is_day_off=True) for day in ("saturday", "sunday")]
    return ScheduleWeekIn(days=days)

async def seed(reset: bool):
    rng = random.Random(42)
    try:
        async with AsyncSessionLocal() as session:
            if reset:
                await session.execute(delete(ScheduleEntry))
                await session.execute(delete(Staff))
                await session.commit()
                print("🗑️  Personal y horarios borrados")

            for number, capacity, gender in ROOMS:
                if await session.scalar(select(Room.id).where(Room.number == number)):
                    continue
                await RoomService.create_room(session, RoomCreate(number=number, capacity=capacity, gender=gender))
            print(f"✅ {len(ROOMS)} chambres disponibles")

            for data in PERSONNEL:
                if await session.scalar(select(Staff.id).where(Staff.email == data["email"])):
                    continue
                staff = await StaffService.create(session, StaffCreate(**data), rng=rng)
                await ScheduleService.replace_week(session, staff.id, _week(rng.choice((6, 8, 14))))
                print(f"  - {staff.identifier} {staff.full_name} ({staff.department})")
            print("✅ Personal y horarios creados")
    finally:
        await engine.dispose()

def main():
    parser = argparse.ArgumentParser(description="Seeds de desarrollo del foyer")
    parser.add_argument("--reset", action="store_true", help="Borrar personal y horarios antes de insertar")
    args = parser.parse_args()
    asyncio.run(seed(args.reset))

if __name__ == "__main__":
    main()
