from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User, Workshop, WorkshopStatus


@dataclass
class WorkshopDetailRow:
    id: int
    title: str
    date: datetime | None
    location: str | None
    participants: int | None
    status: WorkshopStatus
    client_name: str | None
    instructor_id: int | None
    instructor_name: str | None
    created_at: datetime | None


class WorkshopRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, workshop_id: int) -> Workshop | None:
        return await self._session.get(Workshop, int(workshop_id))

    async def list(self, *, process_id: int | None = None) -> list[Workshop]:
        stmt = select(Workshop)
        if process_id is not None:
            stmt = stmt.where(Workshop.process_id == int(process_id))
        stmt = stmt.order_by(Workshop.created_at.desc(), Workshop.id.desc())
        return list((await self._session.scalars(stmt)).all())

    async def create(self, **fields: Any) -> Workshop:
        workshop = Workshop(**fields)
        self._session.add(workshop)
        await self._session.flush()
        return workshop

    async def update(self, workshop: Workshop, fields: dict[str, Any]) -> Workshop:
        for key, value in fields.items():
            setattr(workshop, key, value)
        await self._session.flush()
        return workshop

    async def delete(self, workshop_id: int) -> None:
        await self._session.execute(delete(Workshop).where(Workshop.id == int(workshop_id)))

    async def count(self) -> int:
        return int(
            (await self._session.execute(select(func.count()).select_from(Workshop))).scalar_one()
        )

    async def list_with_details(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        instructor_id: int | None = None,
    ) -> list[WorkshopDetailRow]:
        stmt = select(
            Workshop.id,
            Workshop.title,
            Workshop.date,
            Workshop.location,
            Workshop.participants,
            Workshop.status,
            Workshop.client_name,
            Workshop.instructor_id,
            User.name.label("instructor_name"),
            Workshop.created_at,
        ).outerjoin(User, User.id == Workshop.instructor_id)
        if instructor_id is not None:
            stmt = stmt.where(Workshop.instructor_id == int(instructor_id))
        if start is not None:
            stmt = stmt.where(Workshop.date >= start)
        if end is not None:
            stmt = stmt.where(Workshop.date < end)
        stmt = stmt.order_by(Workshop.date.desc(), Workshop.id.desc())
        rows = (await self._session.execute(stmt)).mappings().all()
        return [WorkshopDetailRow(**dict(r)) for r in rows]
