"""
User API tests - registration bonus, login, profile.
"""

import pytest
from httpx import AsyncClient

REGISTRATION = {
    "username": "newbie",
    "email": "newbie@example.com",
    "password": "s3cret-pass",
    "first_name": "New",
    "last_name": "Bie",
}


@pytest.mark.asyncio
async def test_register_credits_welcome_bonus(client: AsyncClient):
    response = await client.post("/api/v1/users/register", json=REGISTRATION)
    assert response.status_code == 201
    user = response.json()
    assert user["points_balance"] == 100
    assert "hashed_password" not in user

    login = await client.post(
        "/api/v1/users/login", json={"email": REGISTRATION["email"], "password": REGISTRATION["password"]}
    )
    assert login.status_code == 200
    token = login.json()
    assert token["user_id"] == user["id"]
    headers = {"Authorization": f"Bearer {token['access_token']}"}

    history = (await client.get("/api/v1/users/me/transactions", headers=headers)).json()
    assert len(history) == 1
    assert history[0]["type"] == "bonus"
    assert history[0]["points"] == 100
    assert history[0]["balance_after"] == 100


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["username", "email"])
async def test_register_duplicate_conflict(client: AsyncClient, field):
    await client.post("/api/v1/users/register", json=REGISTRATION)
    duplicate = {**REGISTRATION, "username": "other", "email": "other@example.com", field: REGISTRATION[field]}

    response = await client.post("/api/v1/users/register", json=duplicate)

    assert response.status_code == 409
    assert response.json()["error"]["details"] == {"field": field}


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/users/login", json={"email": test_user.email, "password": "nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    assert (await client.get("/api/v1/users/me")).status_code == 401
    bad = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


@pytest.mark.asyncio
async def test_profile_update_ignores_points(client: AsyncClient, auth_headers: dict):
    response = await client.patch(
        "/api/v1/users/me",
        headers=auth_headers,
        json={"bio": "Thrift lover", "first_name": "Tess", "points_balance": 10_000},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Thrift lover"
    assert body["first_name"] == "Tess"
    assert body["points_balance"] == 100
