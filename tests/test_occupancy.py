import pytest
from sqlalchemy import select

from foyer.exceptions import CapacityError, NotFoundError, ValidationError
from foyer.models import Resident, Room
from foyer.security import new_uuid
from foyer.services.occupancy_service import OccupancyService, build_room_out
from foyer.services.room_service import RoomService
from tests.conftest import make_resident, make_room


async def _occupant_ids(db, room_id):
    return {r.id for r in await OccupancyService.list_occupants(db, room_id)}


class TestAssign:
    async def test_capacity_two_scenario(self, db):
        room = await make_room(db, capacity=2)
        a = await make_resident(db)
        b = await make_resident(db)
        c = await make_resident(db)

        outcome = await OccupancyService.assign(db, room.id, [a.id, b.id])
        assert outcome.added_count == 2
        assert build_room_out(outcome.room, outcome.occupants).status == "occupied"
        assert await _occupant_ids(db, room.id) == {a.id, b.id}

        outcome = await OccupancyService.assign(db, room.id, [])
        assert outcome.removed_count == 2
        assert build_room_out(outcome.room, outcome.occupants).status == "available"

        room_id, a_id, b_id, c_id = room.id, a.id, b.id, c.id
        await OccupancyService.assign(db, room_id, [a_id, b_id])
        with pytest.raises(CapacityError):
            await OccupancyService.assign(db, room_id, [a_id, b_id, c_id])
        assert await _occupant_ids(db, room_id) == {a_id, b_id}

    async def test_replacing_occupants_unlinks_previous(self, db):
        room = await make_room(db, capacity=2)
        a = await make_resident(db)
        b = await make_resident(db)
        c = await make_resident(db)
        await OccupancyService.assign(db, room.id, [a.id, b.id])

        outcome = await OccupancyService.assign(db, room.id, [b.id, c.id])

        assert (outcome.added_count, outcome.removed_count) == (1, 1)
        assert await _occupant_ids(db, room.id) == {b.id, c.id}
        assert (await db.get(Resident, a.id)).room_id is None

    async def test_resident_moves_out_of_previous_room(self, db):
        first = await make_room(db, number="101")
        second = await make_room(db, number="102")
        a = await make_resident(db)
        await OccupancyService.assign(db, first.id, [a.id])

        await OccupancyService.assign(db, second.id, [a.id])

        assert await _occupant_ids(db, first.id) == set()
        assert await _occupant_ids(db, second.id) == {a.id}

    async def test_invalid_inputs(self, db):
        room_id = (await make_room(db)).id
        a_id = (await make_resident(db)).id

        with pytest.raises(ValidationError):
            await OccupancyService.assign(db, room_id, a_id)
        with pytest.raises(ValidationError):
            await OccupancyService.assign(db, room_id, ["not-a-uuid"])
        with pytest.raises(ValidationError):
            await OccupancyService.assign(db, room_id, [a_id, a_id])
        with pytest.raises(NotFoundError):
            await OccupancyService.assign(db, new_uuid(), [a_id])
        with pytest.raises(NotFoundError):
            await OccupancyService.assign(db, room_id, [new_uuid()])

    async def test_external_resident_rejected(self, db):
        room_id = (await make_room(db)).id
        ext = await make_resident(db, type="external", cycle="external", session_year=None)

        with pytest.raises(ValidationError):
            await OccupancyService.assign(db, room_id, [ext.id])
        assert await _occupant_ids(db, room_id) == set()

    async def test_gender_mismatch_is_a_warning_by_default(self, db):
        room = await make_room(db, gender="boys")
        girl = await make_resident(db, gender="female")

        outcome = await OccupancyService.assign(db, room.id, [girl.id])

        assert len(outcome.warnings) == 1
        assert await _occupant_ids(db, room.id) == {girl.id}

    async def test_gender_mismatch_blocks_when_enforced(self, db, enforce_gender):
        room_id = (await make_room(db, gender="girls")).id
        boy = await make_resident(db, gender="male")

        with pytest.raises(ValidationError):
            await OccupancyService.assign(db, room_id, [boy.id])
        assert await _occupant_ids(db, room_id) == set()

    async def test_mixed_room_accepts_everyone(self, db, enforce_gender):
        room = await make_room(db, gender="mixed", capacity=2)
        boy = await make_resident(db, gender="male")
        girl = await make_resident(db, gender="female")

        outcome = await OccupancyService.assign(db, room.id, [boy.id, girl.id])

        assert outcome.warnings == []
        assert len(outcome.occupants) == 2


class TestOccupancyQueries:
    async def test_conflict_report(self, db):
        room = await make_room(db, number="101")
        other = await make_room(db, number="102")
        a = await make_resident(db, room_id=other.id)
        b = await make_resident(db, room_id=room.id)
        c = await make_resident(db)

        report = await OccupancyService.check_conflicts(db, room.id, [a.id, b.id, c.id])

        assert report.has_conflicts
        assert [(x.resident_id, x.room_number) for x in report.conflicts] == [(a.id, "102")]

    async def test_available_residents_for_room(self, db):
        room = await make_room(db, gender="girls", capacity=3)
        free_girl = await make_resident(db, gender="female")
        await make_resident(db, gender="female", room_id=room.id)
        await make_resident(db, gender="male")
        await make_resident(db, gender="female", type="external", cycle="external", session_year=None)

        available = await OccupancyService.available_residents(db, room.id)

        assert [r.id for r in available.residents] == [free_girl.id]
        assert available.room.current_occupants == 1
        assert available.room.available_places == 2


class TestRoomLifecycle:
    async def test_deleting_room_clears_links(self, db):
        room = await make_room(db)
        a = await make_resident(db, room_id=room.id)

        await RoomService.delete_room(db, room.id)

        assert await db.get(Room, room.id) is None
        refreshed = await db.scalar(select(Resident).where(Resident.id == a.id).execution_options(populate_existing=True))
        assert refreshed.room_id is None

    async def test_deleting_resident_frees_the_place(self, db):
        room = await make_room(db, capacity=1)
        a = await make_resident(db, room_id=room.id)

        await db.delete(a)
        await db.commit()

        out = await RoomService.get_room(db, room.id)
        assert out.status == "available"
        assert out.occupants == []
