from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import ClientContact


class ClientContactRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, contact_id: int) -> ClientContact | None:
        return await self._session.get(ClientContact, int(contact_id))

    async def list(
        self, *, client_name: str | None = None, active_only: bool = False
    ) -> list[ClientContact]:
        stmt = select(ClientContact)
        if client_name is not None:
            stmt = stmt.where(ClientContact.client_name == client_name)
        if active_only:
            stmt = stmt.where(ClientContact.is_active.is_(True))
        stmt = stmt.order_by(ClientContact.client_name.asc(), ClientContact.id.asc())
        return list((await self._session.scalars(stmt)).all())

    async def create(self, **fields: Any) -> ClientContact:
        contact = ClientContact(**fields)
        self._session.add(contact)
        await self._session.flush()
        return contact

    async def update(self, contact: ClientContact, fields: dict[str, Any]) -> ClientContact:
        for key, value in fields.items():
            setattr(contact, key, value)
        await self._session.flush()
        return contact
