from tests.conftest import make_resident, make_room, make_staff

BASE = "/api/v1/dashboard"


class TestDashboard:
    async def test_empty_database(self, client, auth_headers):
        stats = (await client.get(f"{BASE}/stats", headers=auth_headers)).json()["data"]
        assert stats["rooms"]["total"] == 0
        assert stats["rooms"]["occupancy_rate"] == 0
        assert stats["residents"]["total"] == 0
        assert stats["alerts"] == []

    async def test_counts(self, client, auth_headers, db):
        occupied = await make_room(db, number="101", capacity=2)
        await make_room(db, number="102", capacity=3)
        free = await make_room(db, number="201", capacity=1)
        await make_room(db, number="202", capacity=2)
        await make_resident(db, room_id=occupied.id)
        await make_resident(db, room_id=occupied.id, gender="female")
        await make_resident(db)
        await make_resident(db, type="external", cycle="external")
        await make_staff(db)
        await make_staff(db, status="inactive")

        response = await client.get(f"{BASE}/stats", headers=auth_headers)
        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["rooms"]["total"] == 4
        assert stats["rooms"]["occupied"] == 1
        assert stats["rooms"]["available"] == 3
        assert stats["rooms"]["occupancy_rate"] == 25
        assert free.id in {room["id"] for room in stats["rooms"]["free_rooms"]}
        assert stats["capacity"] == {
            "total_capacity": 8, "total_beds": 8, "total_occupants": 2, "available_places": 6,
        }
        assert stats["residents"] == {
            "total": 4, "male": 3, "female": 1, "internal": 3, "external": 1,
            "with_room": 2, "without_room": 2,
        }
        assert stats["staff"] == {"total": 2, "active": 1, "inactive": 1}
        assert stats["alerts"] == []

        quick = (await client.get(f"{BASE}/quick-stats", headers=auth_headers)).json()["data"]
        assert quick == {
            "total_rooms": 4, "available_rooms": 3, "occupancy_rate": 25,
            "total_residents": 4, "residents_without_room": 2, "total_staff": 2,
        }

    async def test_alert_when_almost_full(self, client, auth_headers, db):
        room = await make_room(db)
        await make_resident(db, room_id=room.id)
        stats = (await client.get(f"{BASE}/stats", headers=auth_headers)).json()["data"]
        assert stats["rooms"]["occupancy_rate"] == 100
        assert [alert["id"] for alert in stats["alerts"]] == ["capacity-alert"]

    async def test_requires_authentication(self, client):
        assert (await client.get(f"{BASE}/stats")).status_code == 401
