from datetime import date

from sqlalchemy import select

from foyer.models import Resident
from foyer.schemas import ResidentFilters
from foyer.services.resident_query import build_resident_predicate, resident_order_by
from tests.conftest import make_resident, make_room

TODAY = date(2024, 11, 15)


async def _ids(db, **params):
    filters = ResidentFilters.from_query(params)
    result = await db.execute(
        select(Resident.id).where(build_resident_predicate(filters, TODAY)).order_by(*resident_order_by(filters))
    )
    return set(result.scalars().all())


class TestSearch:
    async def test_matches_names_email_identifier_and_company(self, db):
        alice = await make_resident(db, first_name="Alice", company="Atlas")
        bob = await make_resident(db, last_name="Bennani")
        carl = await make_resident(db, identifier="NOV24-0099")
        await make_resident(db)

        assert await _ids(db, search="alic") == {alice.id}
        assert await _ids(db, search="BENN") == {bob.id}
        assert await _ids(db, search="nov24") == {carl.id}
        assert await _ids(db, search="atlas") == {alice.id}

    async def test_wildcards_are_literal(self, db):
        percent = await make_resident(db, company="100% Formation")
        await make_resident(db, company="Formation Pro")

        assert await _ids(db, search="%") == {percent.id}
        assert await _ids(db, search="_") == set()


class TestStayWindow:
    async def test_active_and_inactive_partition(self, db):
        current = await make_resident(db, arrival_date=date(2024, 9, 1), departure_date=date(2024, 12, 1))
        open_ended = await make_resident(db, arrival_date=date(2024, 9, 1))
        leaves_today = await make_resident(db, arrival_date=date(2024, 9, 1), departure_date=TODAY)
        future = await make_resident(db, arrival_date=date(2025, 2, 1))
        gone = await make_resident(db, arrival_date=date(2024, 2, 1), departure_date=date(2024, 6, 30))

        active = await _ids(db, status="active")
        assert active == {current.id, leaves_today.id}
        assert open_ended.id not in active
        assert await _ids(db, status="inactive") == {future.id, gone.id}


class TestRoomFilters:
    async def test_with_and_without_room(self, db):
        room = await make_room(db, number="A-101")
        housed = await make_resident(db, room_id=room.id)
        homeless = await make_resident(db)

        assert await _ids(db, room="withRoom") == {housed.id}
        assert await _ids(db, room="withoutRoom") == {homeless.id}

    async def test_specific_room_matches_room_number(self, db):
        first = await make_room(db, number="A-101")
        second = await make_room(db, number="B-201")
        in_first = await make_resident(db, room_id=first.id)
        await make_resident(db, room_id=second.id)

        assert await _ids(db, room="withRoom", specificRoom="a-1") == {in_first.id}
        assert await _ids(db, room="withRoom", specificRoom="Z-999") == set()


class TestClassification:
    async def test_session_year_gender_and_type(self, db):
        sep24 = await make_resident(db, cycle="sep", session_year="2024", gender="female")
        sep25 = await make_resident(db, cycle="sep", session_year="2025")
        nov24 = await make_resident(db, cycle="nov", session_year="2024")
        ext = await make_resident(db, type="external", cycle="external", session_year=None)

        assert await _ids(db, session="septembre") == {sep24.id, sep25.id}
        assert await _ids(db, session="septembre", year="2024") == {sep24.id}
        assert await _ids(db, year="2024") == {sep24.id, nov24.id}
        assert await _ids(db, gender="female") == {sep24.id}
        assert await _ids(db, type="external") == {ext.id}

    async def test_arrival_bounds(self, db):
        early = await make_resident(db, arrival_date=date(2024, 9, 1))
        late = await make_resident(db, arrival_date=date(2024, 11, 1))

        assert await _ids(db, startDate="2024-10-01") == {late.id}
        assert await _ids(db, endDate="2024-10-01") == {early.id}
        assert await _ids(db, startDate="2024-09-01", endDate="2024-11-01") == {early.id, late.id}


class TestPaymentFilters:
    async def test_lodging_paid_unpaid_exempt(self, db):
        paid_all = await make_resident(
            db, lodging_enabled=True, lodging_status="paid",
            lodging_term1_price=100, lodging_term2_price=100, lodging_term3_price=100,
        )
        paid_first = await make_resident(
            db, lodging_enabled=True, lodging_status="paid",
            lodging_term1_price=100, lodging_term2_price=0, lodging_term3_price=0,
        )
        exempt_zero = await make_resident(db, lodging_enabled=True, lodging_status="exempt")
        exempt_priced = await make_resident(
            db, lodging_enabled=True, lodging_status="exempt",
            lodging_term1_price=80, lodging_term2_price=80, lodging_term3_price=0,
        )
        disabled = await make_resident(db, lodging_enabled=False)

        assert await _ids(db, lodgingStatus="paid") == {paid_all.id}
        assert await _ids(db, lodgingStatus="paid", lodgingTerms="1") == {paid_all.id, paid_first.id}
        # una cuota a 0 cuenta como impagada aunque el libro esté dispensado
        assert await _ids(db, lodgingStatus="unpaid") == {paid_first.id, exempt_zero.id, exempt_priced.id, disabled.id}
        assert await _ids(db, lodgingStatus="unpaid", lodgingTerms="1") == {exempt_zero.id, disabled.id}
        assert await _ids(db, lodgingStatus="unpaid", lodgingTerms="1,2") == {paid_first.id, exempt_zero.id, disabled.id}
        assert await _ids(db, lodgingStatus="exempt") == {exempt_zero.id, exempt_priced.id}

    async def test_registration_status(self, db):
        paid = await make_resident(db, registration_enabled=True, registration_status="paid", registration_price=300)
        zero = await make_resident(db, registration_enabled=True, registration_status="paid", registration_price=0)
        disabled = await make_resident(db)

        assert await _ids(db, registrationStatus="paid") == {paid.id}
        assert await _ids(db, registrationStatus="unpaid") == {zero.id, disabled.id}

    async def test_categories_combine_with_and(self, db):
        target = await make_resident(
            db, first_name="Yasmine", gender="female", lodging_enabled=True, lodging_status="paid",
            lodging_term1_price=50, lodging_term2_price=50, lodging_term3_price=50,
        )
        await make_resident(db, first_name="Yasmine", gender="female")
        await make_resident(
            db, first_name="Yassine", lodging_enabled=True, lodging_status="paid",
            lodging_term1_price=50, lodging_term2_price=50, lodging_term3_price=50,
        )

        assert await _ids(db, search="yas", gender="female", lodgingStatus="paid") == {target.id}


class TestOrdering:
    async def test_sort_by_last_name(self, db):
        await make_resident(db, last_name="Zeroual")
        await make_resident(db, last_name="Amrani")
        filters = ResidentFilters.from_query({"sortBy": "lastName", "sortOrder": "asc"})
        result = await db.execute(
            select(Resident.last_name).where(build_resident_predicate(filters, TODAY)).order_by(*resident_order_by(filters))
        )
        assert list(result.scalars().all()) == ["Amrani", "Zeroual"]
