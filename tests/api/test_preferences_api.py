from __future__ import annotations

import pytest

from app.models import PREFERENCE_FLAGS
from tests.helpers import auth


@pytest.mark.asyncio
async def test_defaults_are_all_on(app_client, instructor):
    res = await app_client.get("/notifications/preferences", headers=auth(instructor))

    assert res.status_code == 200
    body = res.json()
    assert body["user_id"] == instructor["id"]
    assert all(body[flag] is True for flag in PREFERENCE_FLAGS)


@pytest.mark.asyncio
async def test_patch_only_touches_given_flags(app_client, instructor):
    res = await app_client.patch(
        "/notifications/preferences",
        json={"on_equipment_ready": False},
        headers=auth(instructor),
    )
    assert res.status_code == 200
    assert res.json()["on_equipment_ready"] is False

    res = await app_client.patch(
        "/notifications/preferences",
        json={"on_workshop_created": False},
        headers=auth(instructor),
    )
    body = res.json()
    assert body["on_equipment_ready"] is False
    assert body["on_workshop_created"] is False
    assert body["on_report_approved"] is True


@pytest.mark.asyncio
async def test_admin_manages_other_users(app_client, admin, instructor):
    res = await app_client.patch(
        f"/notifications/preferences/{instructor['id']}",
        json={"on_process_assigned": False},
        headers=auth(admin),
    )
    assert res.status_code == 200
    assert res.json()["user_id"] == instructor["id"]

    own = (await app_client.get("/notifications/preferences", headers=auth(instructor))).json()
    assert own["on_process_assigned"] is False

    res = await app_client.get("/notifications/preferences/4242", headers=auth(admin))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_instructor_cannot_read_others(app_client, admin, instructor):
    res = await app_client.get(f"/notifications/preferences/{admin['id']}", headers=auth(instructor))
    assert res.status_code == 403

    res = await app_client.patch(
        f"/notifications/preferences/{admin['id']}",
        json={"on_workshop_created": False},
        headers=auth(instructor),
    )
    assert res.status_code == 403
