from __future__ import annotations

from httpx import AsyncClient

ADMIN_EMAIL = "admin@example.com"


async def login(client: AsyncClient, email: str) -> dict:
    res = await client.post("/auth/login", json={"email": email})
    assert res.status_code == 200, res.text
    return res.json()


def auth(user: dict) -> dict[str, str]:
    return {"X-User-Id": str(user["id"])}
