from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import EquipmentItem, EquipmentStatus, StatusEvent, Workshop
from app.models.base import utcnow
from app.repositories.interfaces import EquipmentListRow


class SqlAlchemyEquipmentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, item_id: int) -> EquipmentItem | None:
        return await self._session.get(EquipmentItem, int(item_id))

    async def create(
        self,
        *,
        name: str,
        workshop_id: int | None,
        status: EquipmentStatus = EquipmentStatus.ORDERED,
        assigned_to: str | None = None,
        notes: str | None = None,
    ) -> EquipmentItem:
        item = EquipmentItem(
            name=name,
            workshop_id=workshop_id,
            status=status,
            assigned_to=assigned_to,
            notes=notes,
        )
        self._session.add(item)
        await self._session.flush()
        return item

    async def update_status(self, item: EquipmentItem, status: EquipmentStatus) -> EquipmentItem:
        item.status = status
        item.updated_at = utcnow()
        await self._session.flush()
        return item

    async def append_status_event(
        self,
        *,
        equipment_id: int,
        from_status: EquipmentStatus | None,
        to_status: EquipmentStatus,
        changed_by_id: int | None,
        notes: str | None,
    ) -> StatusEvent:
        event = StatusEvent(
            equipment_id=equipment_id,
            from_status=from_status,
            to_status=to_status,
            changed_by_id=changed_by_id,
            notes=notes,
        )
        self._session.add(event)
        await self._session.flush()
        return event

    async def list_events(self, item_id: int) -> list[StatusEvent]:
        stmt = (
            select(StatusEvent)
            .where(StatusEvent.equipment_id == int(item_id))
            .order_by(StatusEvent.created_at.desc(), StatusEvent.id.desc())
        )
        return list((await self._session.scalars(stmt)).all())

    async def delete_by_workshop(self, workshop_id: int) -> int:
        """Delete a workshop's items, removing their status events first."""
        item_ids = select(EquipmentItem.id).where(EquipmentItem.workshop_id == int(workshop_id))
        await self._session.execute(
            delete(StatusEvent).where(StatusEvent.equipment_id.in_(item_ids))
        )
        result = await self._session.execute(
            delete(EquipmentItem).where(EquipmentItem.workshop_id == int(workshop_id))
        )
        return int(result.rowcount or 0)

    async def list_with_workshop(
        self, *, status: EquipmentStatus | None = None
    ) -> list[EquipmentListRow]:
        stmt = select(EquipmentItem, Workshop.title, Workshop.date, Workshop.location).outerjoin(
            Workshop, Workshop.id == EquipmentItem.workshop_id
        )
        if status is not None:
            stmt = stmt.where(EquipmentItem.status == status)
        stmt = stmt.order_by(EquipmentItem.created_at.desc(), EquipmentItem.id.desc())
        rows = (await self._session.execute(stmt)).all()
        return [
            EquipmentListRow(
                item=item, workshop_title=title, workshop_date=date, workshop_location=location
            )
            for item, title, date, location in rows
        ]

    async def list_by_workshop(self, workshop_id: int) -> list[EquipmentItem]:
        stmt = (
            select(EquipmentItem)
            .where(EquipmentItem.workshop_id == int(workshop_id))
            .order_by(EquipmentItem.id.asc())
        )
        return list((await self._session.scalars(stmt)).all())

    async def count_by_status(self) -> dict[EquipmentStatus, int]:
        stmt = select(EquipmentItem.status, func.count()).group_by(EquipmentItem.status)
        counts = {status: 0 for status in EquipmentStatus}
        for status, count in (await self._session.execute(stmt)).all():
            counts[EquipmentStatus(status)] = int(count)
        return counts
