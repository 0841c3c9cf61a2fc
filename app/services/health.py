from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.catalog import get_catalog


class HealthService:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def ok(self) -> dict:
        await self._session.execute(text("SELECT 1"))
        return {"ok": True}

    async def ready(self) -> dict:
        """Database round trip plus a loadable exercise catalog."""
        await self._session.execute(text("SELECT 1"))
        exercises = len(get_catalog().list_exercises())
        return {"status": "ok", "database": "ok", "exercises": exercises}
