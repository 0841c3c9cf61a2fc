from __future__ import annotations

import pytest

from tests.helpers import auth, login


@pytest.mark.asyncio
async def test_login_creates_instructor_once(app_client):
    first = await login(app_client, "Noa.Levi@example.com")
    second = await login(app_client, "noa.levi@example.com")

    assert first["id"] == second["id"]
    assert first["role"] == "instructor"
    assert first["name"] == "Noa.Levi"


@pytest.mark.asyncio
async def test_super_admin_email_is_admin(admin):
    assert admin["role"] == "admin"


@pytest.mark.asyncio
async def test_login_rejects_invalid_email(app_client):
    res = await app_client.post("/auth/login", json={"email": "not-an-email"})
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_me_requires_known_user(app_client, instructor):
    assert (await app_client.get("/auth/me")).status_code == 401
    assert (await app_client.get("/auth/me", headers={"X-User-Id": "9999"})).status_code == 401
    assert (await app_client.get("/auth/me", headers={"X-User-Id": "abc"})).status_code == 401

    res = await app_client.get("/auth/me", headers=auth(instructor))
    assert res.status_code == 200
    assert res.json()["email"] == "dana@example.com"


@pytest.mark.asyncio
async def test_list_users_sorted_by_name(app_client, admin):
    await login(app_client, "zohar@example.com")
    await login(app_client, "avi@example.com")

    res = await app_client.get("/users", headers=auth(admin))

    assert res.status_code == 200
    names = [u["name"] for u in res.json()]
    assert names == sorted(names)
    assert len(names) == 3


@pytest.mark.asyncio
async def test_role_change_is_admin_only(app_client, admin, instructor):
    other = await login(app_client, "office@example.com")

    res = await app_client.put(
        f"/users/{other['id']}/role", json={"role": "office"}, headers=auth(instructor)
    )
    assert res.status_code == 403

    res = await app_client.put(
        f"/users/{other['id']}/role", json={"role": "office"}, headers=auth(admin)
    )
    assert res.status_code == 200
    assert res.json()["role"] == "office"


@pytest.mark.asyncio
async def test_admin_cannot_change_own_role_or_delete_self(app_client, admin):
    res = await app_client.put(
        f"/users/{admin['id']}/role", json={"role": "instructor"}, headers=auth(admin)
    )
    assert res.status_code == 400

    res = await app_client.delete(f"/users/{admin['id']}", headers=auth(admin))
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_invalid_role_value_is_rejected(app_client, admin, instructor):
    res = await app_client.put(
        f"/users/{instructor['id']}/role", json={"role": "boss"}, headers=auth(admin)
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_delete_user(app_client, admin, instructor):
    res = await app_client.delete(f"/users/{instructor['id']}", headers=auth(admin))
    assert res.status_code == 200
    assert res.json() == {"ok": True}

    res = await app_client.delete(f"/users/{instructor['id']}", headers=auth(admin))
    assert res.status_code == 404
    assert (await app_client.get("/auth/me", headers=auth(instructor))).status_code == 401
