"""Repository abstractions for the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from app.models import EquipmentItem, EquipmentStatus, StatusEvent


@dataclass
class EquipmentListRow:
    item: EquipmentItem
    workshop_title: str | None
    workshop_date: datetime | None
    workshop_location: str | None


class EquipmentRepository(Protocol):
    """Persistence boundary used by the equipment status workflow."""

    async def get(self, item_id: int) -> EquipmentItem | None: ...

    async def update_status(
        self, item: EquipmentItem, status: EquipmentStatus
    ) -> EquipmentItem: ...

    async def append_status_event(
        self,
        *,
        equipment_id: int,
        from_status: EquipmentStatus | None,
        to_status: EquipmentStatus,
        changed_by_id: int | None,
        notes: str | None,
    ) -> StatusEvent: ...

    async def list_events(self, item_id: int) -> list[StatusEvent]: ...

    async def delete_by_workshop(self, workshop_id: int) -> int: ...

    async def create(
        self,
        *,
        name: str,
        workshop_id: int | None,
        status: EquipmentStatus = EquipmentStatus.ORDERED,
        assigned_to: str | None = None,
        notes: str | None = None,
    ) -> EquipmentItem: ...

    async def list_with_workshop(
        self, *, status: EquipmentStatus | None = None
    ) -> list[EquipmentListRow]: ...

    async def list_by_workshop(self, workshop_id: int) -> list[EquipmentItem]: ...

    async def count_by_status(self) -> dict[EquipmentStatus, int]: ...
