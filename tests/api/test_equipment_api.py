from __future__ import annotations

import pytest

from tests.helpers import auth


async def _create_item(client, user, name="Rope: 4", **extra) -> dict:
    res = await client.post("/equipment", json={"name": name, **extra}, headers=auth(user))
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_create_defaults_to_ordered(app_client, instructor):
    item = await _create_item(app_client, instructor)
    assert item["status"] == "ORDERED"
    assert item["workshop_id"] is None


@pytest.mark.asyncio
async def test_create_for_unknown_workshop_is_404(app_client, instructor):
    res = await app_client.post(
        "/equipment", json={"name": "Ball: 1", "workshop_id": 999}, headers=auth(instructor)
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_advance_records_one_event(app_client, instructor):
    item = await _create_item(app_client, instructor)

    res = await app_client.post(
        f"/equipment/{item['id']}/advance", json={"notes": "on the shelf"}, headers=auth(instructor)
    )
    assert res.status_code == 200
    body = res.json()
    assert body["item"]["status"] == "READY"
    assert body["event"]["from_status"] == "ORDERED"
    assert body["event"]["to_status"] == "READY"
    assert body["event"]["changed_by_id"] == instructor["id"]

    events = (await app_client.get(f"/equipment/{item['id']}/events", headers=auth(instructor))).json()
    assert len(events) == 1
    assert events[0]["notes"] == "on the shelf"


@pytest.mark.asyncio
async def test_advance_without_body(app_client, instructor):
    item = await _create_item(app_client, instructor)
    res = await app_client.post(f"/equipment/{item['id']}/advance", headers=auth(instructor))
    assert res.status_code == 200
    assert res.json()["item"]["status"] == "READY"


@pytest.mark.asyncio
async def test_advance_past_returned_is_conflict(app_client, instructor):
    item = await _create_item(app_client, instructor)
    for _ in range(3):
        res = await app_client.post(f"/equipment/{item['id']}/advance", headers=auth(instructor))
        assert res.status_code == 200
    assert res.json()["item"]["status"] == "RETURNED"

    res = await app_client.post(f"/equipment/{item['id']}/advance", headers=auth(instructor))
    assert res.status_code == 409

    events = (await app_client.get(f"/equipment/{item['id']}/events", headers=auth(instructor))).json()
    assert [e["to_status"] for e in events] == ["RETURNED", "PICKED_UP", "READY"]


@pytest.mark.asyncio
async def test_set_status(app_client, instructor):
    item = await _create_item(app_client, instructor)

    res = await app_client.put(
        f"/equipment/{item['id']}/status", json={"status": "PICKED_UP"}, headers=auth(instructor)
    )
    assert res.status_code == 200
    assert res.json()["item"]["status"] == "PICKED_UP"

    res = await app_client.put(
        f"/equipment/{item['id']}/status", json={"status": "LOST"}, headers=auth(instructor)
    )
    assert res.status_code == 400

    res = await app_client.put("/equipment/9999/status", json={"status": "READY"}, headers=auth(instructor))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_status_change_requires_user(app_client, instructor):
    item = await _create_item(app_client, instructor)
    res = await app_client.put(f"/equipment/{item['id']}/status", json={"status": "READY"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_batch_status_isolates_failures(app_client, instructor):
    first = await _create_item(app_client, instructor, "Ball: 2")
    second = await _create_item(app_client, instructor, "Egg: 2")

    res = await app_client.put(
        "/equipment/batch-status",
        json={"ids": [first["id"], 9999, second["id"]], "status": "READY"},
        headers=auth(instructor),
    )

    assert res.status_code == 200
    body = res.json()
    assert [r["id"] for r in body["items"]] == [first["id"], 9999, second["id"]]
    assert [r["ok"] for r in body["items"]] == [True, False, True]
    assert body["items"][1]["error"] == "not_found"
    assert body["items"][0]["item"]["status"] == "READY"
    assert body["success_count"] == 2
    assert body["failure_count"] == 1


@pytest.mark.asyncio
async def test_batch_validation(app_client, instructor):
    item = await _create_item(app_client, instructor)

    res = await app_client.put(
        "/equipment/batch-status", json={"ids": [], "status": "READY"}, headers=auth(instructor)
    )
    assert res.status_code == 400

    res = await app_client.put(
        "/equipment/batch-status", json={"ids": [item["id"]], "status": "GONE"}, headers=auth(instructor)
    )
    assert res.status_code == 400
    events = (await app_client.get(f"/equipment/{item['id']}/events", headers=auth(instructor))).json()
    assert events == []


@pytest.mark.asyncio
async def test_batch_advance(app_client, instructor):
    item = await _create_item(app_client, instructor)
    done = await _create_item(app_client, instructor, "Map: 1", status="RETURNED")

    res = await app_client.post(
        "/equipment/batch-advance", json={"ids": [item["id"], done["id"]]}, headers=auth(instructor)
    )

    assert res.status_code == 200
    body = res.json()
    assert body["items"][0]["item"]["status"] == "READY"
    assert body["items"][1]["error"] == "terminal_status"


@pytest.mark.asyncio
async def test_list_with_status_filter(app_client, instructor):
    ready = await _create_item(app_client, instructor, "Ball: 2")
    await _create_item(app_client, instructor, "Egg: 2")
    await app_client.post(f"/equipment/{ready['id']}/advance", headers=auth(instructor))

    all_items = (await app_client.get("/equipment", headers=auth(instructor))).json()
    assert len(all_items) == 2

    res = await app_client.get("/equipment", params={"status": "READY"}, headers=auth(instructor))
    assert res.status_code == 200
    assert [i["name"] for i in res.json()] == ["Ball: 2"]
    assert res.json()[0]["workshop_title"] is None

    res = await app_client.get("/equipment", params={"status": "bogus"}, headers=auth(instructor))
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_events_for_unknown_item(app_client, instructor):
    res = await app_client.get("/equipment/4242/events", headers=auth(instructor))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_batch_rejects_out_of_range_ids(app_client, instructor):
    item = await _create_item(app_client, instructor)

    for bad in (0, 2**70):
        res = await app_client.put(
            "/equipment/batch-status",
            json={"ids": [item["id"], bad], "status": "READY"},
            headers=auth(instructor),
        )
        assert res.status_code == 422

    res = await app_client.post(
        "/equipment/batch-advance", json={"ids": [-1]}, headers=auth(instructor)
    )
    assert res.status_code == 422
    events = (await app_client.get(f"/equipment/{item['id']}/events", headers=auth(instructor))).json()
    assert events == []
