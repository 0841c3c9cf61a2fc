import pytest

from app.middleware import rate_limit
from app.middleware.rate_limit import limiter


@pytest.fixture
def fresh_limits():
    rate_limit._storage.reset()
    limiter.reset()
    yield
    rate_limit._storage.reset()
    limiter.reset()


@pytest.mark.asyncio
async def test_read_limit_exceeded(app_client, fresh_limits, monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "1")

    for _ in range(120):
        r = await app_client.get("/healthz")
        assert r.status_code == 200
    r = await app_client.get("/healthz")

    assert r.status_code == 429
    assert r.json()["error"]["code"] == "rate_limited"
    assert r.json()["error"]["detail"]["limit"] == rate_limit.READ_LIMIT


@pytest.mark.asyncio
async def test_login_has_its_own_limit(app_client, fresh_limits, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", True)

    for i in range(10):
        r = await app_client.post("/auth/login", json={"email": f"user{i}@example.com"})
        assert r.status_code == 200
    r = await app_client.post("/auth/login", json={"email": "late@example.com"})

    assert r.status_code == 429
    assert r.json()["error"]["code"] == "rate_limited"
