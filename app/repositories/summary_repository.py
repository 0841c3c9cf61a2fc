from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import WorkshopSummary


class WorkshopSummaryRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, workshop_id: int) -> WorkshopSummary | None:
        stmt = select(WorkshopSummary).where(WorkshopSummary.workshop_id == int(workshop_id))
        return (await self._session.scalars(stmt)).first()

    async def create(self, workshop_id: int, **fields: Any) -> WorkshopSummary:
        summary = WorkshopSummary(workshop_id=int(workshop_id), **fields)
        self._session.add(summary)
        await self._session.flush()
        return summary

    async def update(self, summary: WorkshopSummary, fields: dict[str, Any]) -> WorkshopSummary:
        for key, value in fields.items():
            setattr(summary, key, value)
        await self._session.flush()
        return summary

    async def delete_by_workshop(self, workshop_id: int) -> None:
        await self._session.execute(
            delete(WorkshopSummary).where(WorkshopSummary.workshop_id == int(workshop_id))
        )
