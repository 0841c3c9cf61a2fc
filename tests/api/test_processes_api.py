from __future__ import annotations

import pytest

from tests.helpers import auth

PROCESS = {"name": "Leadership track", "type": "odt", "client_name": "Acme"}


@pytest.mark.asyncio
async def test_process_crud(app_client, instructor):
    res = await app_client.post("/processes", json=PROCESS, headers=auth(instructor))
    assert res.status_code == 201
    process = res.json()
    assert process["status"] == "active"

    res = await app_client.put(
        f"/processes/{process['id']}",
        json={"status": "on_hold", "instructor_id": instructor["id"]},
        headers=auth(instructor),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "on_hold"
    assert res.json()["instructor_id"] == instructor["id"]
    assert res.json()["name"] == PROCESS["name"]

    listed = (await app_client.get("/processes", headers=auth(instructor))).json()
    assert [p["id"] for p in listed] == [process["id"]]

    res = await app_client.delete(f"/processes/{process['id']}", headers=auth(instructor))
    assert res.status_code == 200
    res = await app_client.get(f"/processes/{process['id']}", headers=auth(instructor))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_invalid_enums_are_rejected(app_client, instructor):
    res = await app_client.post(
        "/processes", json={**PROCESS, "type": "retreat"}, headers=auth(instructor)
    )
    assert res.status_code == 422

    res = await app_client.post(
        "/processes", json={**PROCESS, "status": "paused"}, headers=auth(instructor)
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_null_required_field_on_update_is_rejected(app_client, instructor):
    process = (await app_client.post("/processes", json=PROCESS, headers=auth(instructor))).json()
    res = await app_client.put(
        f"/processes/{process['id']}", json={"name": None}, headers=auth(instructor)
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_delete_with_workshops_conflicts(app_client, instructor):
    process = (await app_client.post("/processes", json=PROCESS, headers=auth(instructor))).json()
    res = await app_client.post(
        "/workshops", json={"process_id": process["id"]}, headers=auth(instructor)
    )
    assert res.status_code == 201

    res = await app_client.delete(f"/processes/{process['id']}", headers=auth(instructor))
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_unknown_instructor_is_bad_request(app_client, instructor):
    res = await app_client.post(
        "/processes", json={**PROCESS, "instructor_id": 4040}, headers=auth(instructor)
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_processes_require_user(app_client):
    assert (await app_client.get("/processes")).status_code == 401
