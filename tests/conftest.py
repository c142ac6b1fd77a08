import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from foyer.config import settings
from foyer.deps import get_db
from foyer.models import Base, Resident, Room, Staff
from foyer.security import create_access_token, new_uuid
from foyer.services.derivations import floor_from_room_number
from main import app


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(sub=new_uuid(), role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def enforce_gender(monkeypatch):
    monkeypatch.setattr(settings, "enforce_room_gender", True)


# ---------- Factorías ----------

async def make_room(db, number="101", capacity=2, gender="boys", **extra) -> Room:
    room = Room(
        id=new_uuid(),
        number=number,
        capacity=capacity,
        bed_count=capacity,
        floor=floor_from_room_number(number),
        gender=gender,
        **extra,
    )
    db.add(room)
    await db.commit()
    return room


_sequence = iter(range(1, 1_000_000))


async def make_resident(db, **overrides) -> Resident:
    n = next(_sequence)
    values = dict(
        id=new_uuid(),
        identifier=f"SEP24-{n:04d}",
        first_name=f"Prenom{n}",
        last_name=f"Nom{n}",
        email=f"stagiaire{n}@example.com",
        gender="male",
        type="internal",
        cycle="sep",
        session_year="2024",
        arrival_date=date(2024, 9, 1),
    )
    values.update(overrides)
    resident = Resident(**values)
    db.add(resident)
    await db.commit()
    return resident


async def make_staff(db, **overrides) -> Staff:
    n = next(_sequence)
    values = dict(
        id=new_uuid(),
        identifier=f"EMP2024{1000 + n % 9000}",
        first_name=f"Agent{n}",
        last_name=f"Foyer{n}",
        full_name=f"Agent{n} Foyer{n}",
        email=f"agent{n}@example.com",
        phone=f"+216 55 {n:06d}",
        position="Surveillant",
        department="Sécurité",
        hire_date=date(2022, 1, 1),
        status="active",
    )
    values.update(overrides)
    staff = Staff(**values)
    db.add(staff)
    await db.commit()
    return staff
