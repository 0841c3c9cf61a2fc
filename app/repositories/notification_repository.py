from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import NotificationPreference


class NotificationPreferenceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int) -> NotificationPreference | None:
        stmt = select(NotificationPreference).where(NotificationPreference.user_id == int(user_id))
        return (await self._session.scalars(stmt)).first()

    async def get_many(self, user_ids: Iterable[int]) -> dict[int, NotificationPreference]:
        ids = [int(u) for u in user_ids]
        if not ids:
            return {}
        stmt = select(NotificationPreference).where(NotificationPreference.user_id.in_(ids))
        return {int(p.user_id): p for p in (await self._session.scalars(stmt)).all()}

    async def upsert(self, user_id: int, values: dict[str, bool]) -> NotificationPreference:
        pref = await self.get(user_id)
        if pref is None:
            pref = NotificationPreference(user_id=int(user_id), **values)
            self._session.add(pref)
        else:
            for key, value in values.items():
                setattr(pref, key, value)
        await self._session.flush()
        return pref
