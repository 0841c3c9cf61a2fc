from __future__ import annotations

import pytest
import pytest_asyncio

from tests.helpers import auth, login


async def _book(client, user, **fields) -> dict:
    res = await client.post("/workshops", json=fields, headers=auth(user))
    assert res.status_code == 201, res.text
    return res.json()


@pytest_asyncio.fixture
async def booked(app_client, instructor):
    march = await _book(
        app_client,
        instructor,
        date="2026-03-15T09:00:00",
        location="Tel Aviv",
        client_name="Acme",
        participants=24,
    )
    january = await _book(app_client, instructor, date="2025-01-10T09:00:00", location="Haifa")
    undated = await _book(app_client, instructor, location="Eilat")
    return march, january, undated


@pytest.mark.asyncio
async def test_monthly_rows_filter_by_period(app_client, instructor, booked):
    march, january, undated = booked

    res = await app_client.get("/reports/monthly?month=3&year=2026", headers=auth(instructor))
    assert res.status_code == 200
    rows = res.json()
    assert [r["id"] for r in rows] == [march["id"]]
    assert rows[0]["instructor_name"] == "dana"

    res = await app_client.get("/reports/monthly?year=2025", headers=auth(instructor))
    assert [r["id"] for r in res.json()] == [january["id"]]

    # A month on its own does not narrow the result
    res = await app_client.get("/reports/monthly?month=3", headers=auth(instructor))
    assert {r["id"] for r in res.json()} == {march["id"], january["id"], undated["id"]}


@pytest.mark.asyncio
async def test_monthly_rows_filter_by_instructor(app_client, admin, instructor, booked):
    await _book(app_client, admin, date="2026-03-20T09:00:00")

    res = await app_client.get(
        f"/reports/monthly?month=3&year=2026&instructorId={instructor['id']}", headers=auth(admin)
    )
    assert [r["id"] for r in res.json()] == [booked[0]["id"]]


@pytest.mark.asyncio
async def test_monthly_rejects_out_of_range_month(app_client, instructor):
    res = await app_client.get("/reports/monthly?month=13&year=2026", headers=auth(instructor))
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_csv_export(app_client, instructor, booked):
    res = await app_client.get("/reports/monthly-export?month=3&year=2026", headers=auth(instructor))

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert res.headers["content-disposition"] == "attachment; filename=monthly-report-2026-3.csv"
    assert res.content.startswith(b"\xef\xbb\xbf")
    lines = res.content.decode("utf-8-sig").splitlines()
    assert lines == [
        "Instructor,Date,Client,Location,Status,Participants",
        '"dana","15/03/2026","Acme","Tel Aviv","Planned","24"',
    ]


@pytest.mark.asyncio
async def test_csv_export_without_period(app_client, instructor, booked):
    res = await app_client.get("/reports/monthly-export", headers=auth(instructor))

    assert res.headers["content-disposition"] == "attachment; filename=monthly-report-all-all.csv"
    lines = res.content.decode("utf-8-sig").splitlines()
    assert len(lines) == 1 + 3
    assert '"dana","","","Eilat","Planned",""' in lines


@pytest.mark.asyncio
async def test_report_records_lifecycle(app_client, admin, instructor, booked):
    res = await app_client.post("/reports", json={"month": 3, "year": 2026}, headers=auth(instructor))
    assert res.status_code == 201
    report = res.json()
    assert report["instructor_id"] == instructor["id"]
    assert report["workshops_count"] == 1
    assert report["approved"] is False

    res = await app_client.post("/reports", json={"month": 3, "year": 2026}, headers=auth(instructor))
    assert res.status_code == 409

    res = await app_client.post(f"/reports/{report['id']}/approve", headers=auth(instructor))
    assert res.status_code == 403

    res = await app_client.post(f"/reports/{report['id']}/approve", headers=auth(admin))
    assert res.status_code == 200
    assert res.json()["approved"] is True
    assert res.json()["approved_by_id"] == admin["id"]

    res = await app_client.post("/reports/999/approve", headers=auth(admin))
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_instructors_only_see_their_own_records(app_client, admin, instructor):
    other = await login(app_client, "noa@example.com")
    await app_client.post("/reports", json={"month": 1, "year": 2026}, headers=auth(instructor))
    await app_client.post("/reports", json={"month": 1, "year": 2026}, headers=auth(other))

    mine = (await app_client.get("/reports", headers=auth(instructor))).json()
    assert [r["instructor_id"] for r in mine] == [instructor["id"]]
    everyone = (await app_client.get("/reports", headers=auth(admin))).json()
    assert {r["instructor_id"] for r in everyone} == {instructor["id"], other["id"]}


@pytest.mark.asyncio
async def test_filing_for_someone_else_needs_admin(app_client, admin, instructor):
    res = await app_client.post(
        "/reports", json={"month": 2, "year": 2026, "instructor_id": admin["id"]}, headers=auth(instructor)
    )
    assert res.status_code == 403

    res = await app_client.post(
        "/reports", json={"month": 2, "year": 2026, "instructor_id": instructor["id"]}, headers=auth(admin)
    )
    assert res.status_code == 201
    assert res.json()["instructor_id"] == instructor["id"]


@pytest.mark.asyncio
async def test_report_record_validates_month(app_client, instructor):
    res = await app_client.post("/reports", json={"month": 13, "year": 2026}, headers=auth(instructor))
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_reminders_skip_instructors_who_filed(app_client, admin, instructor):
    other = await login(app_client, "noa@example.com")
    await app_client.post("/reports", json={"month": 4, "year": 2026}, headers=auth(instructor))

    res = await app_client.post("/reports/reminders", json={"month": 4, "year": 2026}, headers=auth(admin))
    assert res.status_code == 200
    assert res.json() == {"month": 4, "year": 2026, "instructor_ids": [other["id"]]}

    # Another period: nobody has filed yet
    res = await app_client.post("/reports/reminders", json={"month": 5, "year": 2026}, headers=auth(admin))
    assert set(res.json()["instructor_ids"]) == {instructor["id"], other["id"]}


@pytest.mark.asyncio
async def test_reminders_are_admin_only(app_client, instructor):
    res = await app_client.post(
        "/reports/reminders", json={"month": 4, "year": 2026}, headers=auth(instructor)
    )
    assert res.status_code == 403

    res = await app_client.post(
        "/reports/reminders", json={"month": 13, "year": 2026}, headers=auth(instructor)
    )
    assert res.status_code == 422
