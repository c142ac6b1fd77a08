import pytest

from foyer.schemas import UserCreate
from foyer.security import create_access_token
from foyer.services.user_service import UserService

AUTH = "/api/v1/auth"
USERS = "/api/v1/users"


@pytest.fixture
async def admin(db):
    return await UserService.create(db, UserCreate(
        name="Direction", email="direction@foyer.tn", password="secret123", role="admin",
    ))


@pytest.fixture
async def superadmin(db):
    return await UserService.create(db, UserCreate(
        name="Root", email="root@foyer.tn", password="secret123", role="superadmin",
    ))


def _headers(user):
    return {"Authorization": f"Bearer {create_access_token(sub=user.id, role=user.role)}"}


class TestLogin:
    async def test_login_returns_token_and_user(self, client, admin):
        response = await client.post(f"{AUTH}/login", json={"email": "Direction@Foyer.tn", "password": "secret123"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "direction@foyer.tn"
        assert data["user"]["last_login_at"] is not None

        me = await client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.json()["data"]["id"] == admin.id

    async def test_wrong_password(self, client, admin):
        response = await client.post(f"{AUTH}/login", json={"email": "direction@foyer.tn", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["status"] == "fail"


class TestTokens:
    async def test_invalid_token(self, client):
        response = await client.get(f"{AUTH}/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    async def test_expired_token(self, client, admin):
        token = create_access_token(sub=admin.id, role=admin.role, expires_minutes=-1)
        response = await client.get(f"{AUTH}/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestAccounts:
    async def test_register_requires_admin_role(self, client, db):
        staff_user = await UserService.create(db, UserCreate(
            name="Accueil", email="accueil@foyer.tn", password="secret123",
        ))
        payload = {"name": "Nouveau", "email": "nouveau@foyer.tn", "password": "secret123"}
        response = await client.post(f"{AUTH}/register", json=payload, headers=_headers(staff_user))
        assert response.status_code == 403

    async def test_admin_cannot_create_superadmin(self, client, admin):
        payload = {"name": "Nouveau", "email": "nouveau@foyer.tn", "password": "secret123", "role": "superadmin"}
        response = await client.post(f"{AUTH}/register", json=payload, headers=_headers(admin))
        assert response.status_code == 403

    async def test_register_duplicate_email(self, client, admin):
        payload = {"name": "Doublon", "email": "direction@foyer.tn", "password": "secret123"}
        response = await client.post(f"{AUTH}/register", json=payload, headers=_headers(admin))
        assert response.status_code == 400

    async def test_users_routes_are_superadmin_only(self, client, admin):
        response = await client.get(f"{USERS}/admins", headers=_headers(admin))
        assert response.status_code == 403

    async def test_superadmin_manages_admins(self, client, superadmin):
        headers = _headers(superadmin)
        created = await client.post(
            f"{USERS}/admin",
            json={"name": "Adjoint", "email": "adjoint@foyer.tn", "password": "secret123", "role": "superadmin"},
            headers=headers,
        )
        assert created.status_code == 201
        assert created.json()["data"]["role"] == "admin"

        admins = await client.get(f"{USERS}/admins", headers=headers)
        assert admins.json()["results"] == 2

        user_id = created.json()["data"]["id"]
        assert (await client.delete(f"{USERS}/{user_id}", headers=headers)).status_code == 204
        assert (await client.delete(f"{USERS}/{superadmin.id}", headers=headers)).status_code == 400
