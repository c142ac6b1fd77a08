import asyncio
import random
from datetime import date

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from foyer.models import Base, Resident
from foyer.schemas import ResidentCreate
from foyer.services.counter import SqlSequenceCounter
from foyer.services.identifiers import (
    IdentifierExhausted,
    RESIDENT_SEQUENCE,
    generate_staff_identifier,
    next_resident_identifier,
)
from foyer.services.resident_service import ResidentService
from tests.conftest import make_resident, make_staff


class FixedCounter:
    """Contador en memoria para aislar el formato de la secuencia SQL."""

    def __init__(self, start=0):
        self.value = start
        self.calls = []

    async def next_value(self, name):
        self.calls.append(name)
        self.value += 1
        return self.value


class ScriptedRandom(random.Random):
    def __init__(self, values):
        super().__init__()
        self._values = list(values)

    def randint(self, a, b):
        return self._values.pop(0)


class TestSqlSequenceCounter:
    async def test_values_are_strictly_increasing(self, db):
        counter = SqlSequenceCounter(db)
        values = [await counter.next_value("resident") for _ in range(5)]
        assert values == [1, 2, 3, 4, 5]

    async def test_counters_are_independent(self, db):
        counter = SqlSequenceCounter(db)
        assert await counter.next_value("a") == 1
        assert await counter.next_value("b") == 1
        assert await counter.next_value("a") == 2


class TestResidentIdentifier:
    async def test_format_uses_cycle_and_session_year(self, db):
        counter = FixedCounter()
        identifier = await next_resident_identifier(db, counter, "internal", "nov", "2024", date(2024, 11, 4))
        assert identifier == "NOV24-0001"
        assert counter.calls == [RESIDENT_SEQUENCE]

    async def test_external_uses_arrival_year(self, db):
        identifier = await next_resident_identifier(db, FixedCounter(41), "external", "external", None, date(2025, 3, 1))
        assert identifier == "EXT25-0042"

    async def test_sequence_is_global_across_cycles(self, db):
        counter = SqlSequenceCounter(db)
        first = await next_resident_identifier(db, counter, "internal", "sep", "2024", date(2024, 9, 1))
        second = await next_resident_identifier(db, counter, "internal", "fev", "2025", date(2025, 2, 1))
        assert (first, second) == ("SEP24-0001", "FEV25-0002")

    async def test_skips_identifiers_already_taken(self, db):
        await make_resident(db, identifier="SEP24-0001")
        identifier = await next_resident_identifier(db, FixedCounter(), "internal", "sep", "2024", date(2024, 9, 1))
        assert identifier == "SEP24-0002"


class TestStaffIdentifier:
    async def test_format(self, db):
        identifier = await generate_staff_identifier(db, year=2024, rng=ScriptedRandom([1234]))
        assert identifier == "EMP20241234"

    async def test_redraws_on_collision(self, db):
        await make_staff(db, identifier="EMP20241234")
        identifier = await generate_staff_identifier(db, year=2024, rng=ScriptedRandom([1234, 5678]))
        assert identifier == "EMP20245678"

    async def test_gives_up_after_bounded_attempts(self, db):
        await make_staff(db, identifier="EMP20241234")
        with pytest.raises(IdentifierExhausted):
            await generate_staff_identifier(db, year=2024, rng=ScriptedRandom([1234] * 3), max_attempts=3)


@pytest.fixture
async def file_sessions(tmp_path):
    """Base en fichero: cada sesión usa su propia conexión y su propia transacción."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'foyer.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


class TestConcurrentResidentCreation:
    async def test_parallel_creations_get_distinct_increasing_identifiers(self, file_sessions):
        total = 8

        async def create(n):
            async with file_sessions() as session:
                resident = await ResidentService.create(session, ResidentCreate(
                    first_name=f"Prenom{n}",
                    last_name="Concurrent",
                    email=f"concurrent{n}@example.com",
                    gender="male",
                    arrival_date=date(2024, 9, 2),
                    cycle="sep",
                    session_year="2024",
                ))
                return resident.identifier

        identifiers = await asyncio.gather(*(create(n) for n in range(total)))

        assert len(set(identifiers)) == total
        assert all(identifier.startswith("SEP24-") for identifier in identifiers)
        sequences = sorted(int(identifier.split("-")[1]) for identifier in identifiers)
        assert all(a < b for a, b in zip(sequences, sequences[1:]))
        assert sequences == list(range(1, total + 1))

        async with file_sessions() as session:
            stored = (await session.execute(select(Resident.identifier))).scalars().all()
        assert sorted(stored) == sorted(identifiers)
