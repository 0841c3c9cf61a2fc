from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Process, ProcessStatus, Workshop


class ProcessRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, process_id: int) -> Process | None:
        return await self._session.get(Process, int(process_id))

    async def list(self) -> list[Process]:
        stmt = select(Process).order_by(Process.created_at.desc(), Process.id.desc())
        return list((await self._session.scalars(stmt)).all())

    async def create(self, **fields: Any) -> Process:
        process = Process(**fields)
        self._session.add(process)
        await self._session.flush()
        return process

    async def update(self, process: Process, fields: dict[str, Any]) -> Process:
        for key, value in fields.items():
            setattr(process, key, value)
        await self._session.flush()
        return process

    async def delete(self, process: Process) -> None:
        await self._session.delete(process)
        await self._session.flush()

    async def count_workshops(self, process_id: int) -> int:
        stmt = select(func.count()).select_from(Workshop).where(Workshop.process_id == process_id)
        return int((await self._session.execute(stmt)).scalar_one())

    async def counts(self) -> tuple[int, int]:
        """Return ``(total, active)`` process counts."""
        total = (await self._session.execute(select(func.count()).select_from(Process))).scalar_one()
        active = (
            await self._session.execute(
                select(func.count())
                .select_from(Process)
                .where(Process.status == ProcessStatus.active)
            )
        ).scalar_one()
        return int(total), int(active)
