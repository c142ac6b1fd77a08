import re
from datetime import date

from tests.conftest import make_staff

STAFF = "/api/v1/personnel"
SCHEDULES = "/api/v1/schedules"


def _staff_payload(**overrides):
    data = {
        "first_name": "Hela",
        "last_name": "Mansour",
        "email": "Hela.Mansour@Example.com",
        "phone": "+216 22 333 444",
        "position": "Cuisinière",
        "department": "Restauration",
        "hire_date": "2023-03-01",
    }
    data.update(overrides)
    return data


class TestStaff:
    async def test_create_generates_identifier(self, client, auth_headers):
        response = await client.post(STAFF, json=_staff_payload(), headers=auth_headers)
        assert response.status_code == 201
        staff = response.json()["data"]
        assert re.fullmatch(rf"EMP{date.today().year}\d{{4}}", staff["identifier"])
        assert staff["email"] == "hela.mansour@example.com"
        assert staff["full_name"] == "Hela Mansour"
        assert staff["status"] == "active"

    async def test_duplicate_email_is_rejected(self, client, auth_headers, db):
        await make_staff(db, email="hela.mansour@example.com")
        response = await client.post(STAFF, json=_staff_payload(), headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["status"] == "fail"

    async def test_same_name_and_hire_date_is_rejected(self, client, auth_headers, db):
        await make_staff(db, first_name="Hela", last_name="Mansour", hire_date=date(2023, 3, 1))
        response = await client.post(STAFF, json=_staff_payload(), headers=auth_headers)
        assert response.status_code == 400

    async def test_unknown_department_is_rejected(self, client, auth_headers):
        response = await client.post(STAFF, json=_staff_payload(department="Jardin"), headers=auth_headers)
        assert response.status_code == 400

    async def test_list_filters(self, client, auth_headers, db):
        kept = await make_staff(db, department="Technique", status="active")
        await make_staff(db, department="Technique", status="inactive")
        await make_staff(db, department="Sécurité", status="active")

        response = await client.get(STAFF, params={"department": "Technique", "status": "active"}, headers=auth_headers)
        assert [s["id"] for s in response.json()["data"]] == [kept.id]

    async def test_update_keeps_full_name_in_sync(self, client, auth_headers, db):
        staff = await make_staff(db, first_name="Ali", last_name="Jaziri")
        response = await client.put(f"{STAFF}/{staff.id}", json={"last_name": "Jebali"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["full_name"] == "Ali Jebali"

    async def test_stats(self, client, auth_headers, db):
        await make_staff(db, department="Technique")
        await make_staff(db, department="Technique")
        await make_staff(db, department="Restauration", status="inactive")
        await make_staff(db, department="Sécurité")

        stats = (await client.get(f"{STAFF}/stats", headers=auth_headers)).json()["data"]
        assert stats["total"] == 4
        assert stats["active"] == 3
        assert stats["inactive"] == 1
        assert stats["active_rate"] == 75
        assert stats["departments"]["Technique"] == 2

    async def test_stats_without_staff(self, client, auth_headers):
        stats = (await client.get(f"{STAFF}/stats", headers=auth_headers)).json()["data"]
        assert stats["total"] == 0
        assert stats["active_rate"] == 0

    async def test_delete_removes_schedule(self, client, auth_headers, db):
        staff = await make_staff(db)
        await client.put(
            f"{SCHEDULES}/staff/{staff.id}/monday",
            json={"start_hour": 8, "end_hour": 16},
            headers=auth_headers,
        )
        response = await client.delete(f"{STAFF}/{staff.id}", headers=auth_headers)
        assert response.status_code == 204
        summary = (await client.get(f"{SCHEDULES}/summary", headers=auth_headers)).json()["data"]
        assert summary["staff_scheduled"] == 0


class TestSchedules:
    async def test_upsert_day(self, client, auth_headers, db):
        staff = await make_staff(db)
        url = f"{SCHEDULES}/staff/{staff.id}/Monday"
        first = await client.put(url, json={"start_hour": 8, "end_hour": 16, "tasks": "Accueil"}, headers=auth_headers)
        assert first.status_code == 200
        assert first.json()["data"]["hours"] == 8

        second = await client.put(url, json={"start_hour": 9, "end_hour": 13}, headers=auth_headers)
        assert second.json()["data"]["id"] == first.json()["data"]["id"]
        assert second.json()["data"]["hours"] == 4

    async def test_day_validation(self, client, auth_headers, db):
        staff = await make_staff(db)
        url = f"{SCHEDULES}/staff/{staff.id}/tuesday"
        cases = [
            {"start_hour": 16, "end_hour": 8},
            {"start_hour": 6, "end_hour": 20},
            {"start_hour": 8},
            {"is_day_off": True, "start_hour": 8, "end_hour": 12},
            {"is_day_off": True, "tasks": "Ménage"},
        ]
        for payload in cases:
            response = await client.put(url, json=payload, headers=auth_headers)
            assert response.status_code == 400, payload

    async def test_unknown_weekday(self, client, auth_headers, db):
        staff = await make_staff(db)
        response = await client.put(
            f"{SCHEDULES}/staff/{staff.id}/someday", json={"is_day_off": True}, headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_inactive_staff_cannot_be_scheduled(self, client, auth_headers, db):
        staff = await make_staff(db, status="inactive")
        response = await client.put(
            f"{SCHEDULES}/staff/{staff.id}/monday", json={"start_hour": 8, "end_hour": 12}, headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_replace_week_and_summary(self, client, auth_headers, db):
        staff = await make_staff(db)
        other = await make_staff(db)
        await client.put(
            f"{SCHEDULES}/staff/{staff.id}/sunday", json={"start_hour": 8, "end_hour": 10}, headers=auth_headers,
        )

        week = {"days": [
            {"weekday": "tuesday", "start_hour": 14, "end_hour": 22},
            {"weekday": "monday", "start_hour": 8, "end_hour": 16},
            {"weekday": "wednesday", "is_day_off": True},
        ]}
        response = await client.put(f"{SCHEDULES}/staff/{staff.id}", json=week, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert [e["weekday"] for e in data["entries"]] == ["monday", "tuesday", "wednesday"]
        assert data["total_hours"] == 16
        assert data["days_off"] == 1

        await client.put(
            f"{SCHEDULES}/staff/{other.id}/monday", json={"start_hour": 6, "end_hour": 14}, headers=auth_headers,
        )
        summary = (await client.get(f"{SCHEDULES}/summary", headers=auth_headers)).json()["data"]
        assert summary["staff_scheduled"] == 2
        assert summary["total_hours"] == 24
        assert summary["coverage"]["monday"] == 2
        assert summary["coverage"]["wednesday"] == 0
        assert summary["coverage"]["sunday"] == 0

    async def test_week_rejects_repeated_days(self, client, auth_headers, db):
        staff = await make_staff(db)
        week = {"days": [
            {"weekday": "monday", "start_hour": 8, "end_hour": 12},
            {"weekday": "monday", "start_hour": 13, "end_hour": 17},
        ]}
        response = await client.put(f"{SCHEDULES}/staff/{staff.id}", json=week, headers=auth_headers)
        assert response.status_code == 400

    async def test_delete_day(self, client, auth_headers, db):
        staff = await make_staff(db)
        url = f"{SCHEDULES}/staff/{staff.id}/friday"
        await client.put(url, json={"start_hour": 8, "end_hour": 12}, headers=auth_headers)
        assert (await client.delete(url, headers=auth_headers)).status_code == 204
        assert (await client.delete(url, headers=auth_headers)).status_code == 404
