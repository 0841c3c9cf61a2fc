from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError, NotFoundError
from app.infra.unit_of_work import UnitOfWork
from app.models import EquipmentItem, EquipmentStatus
from app.repositories.interfaces import EquipmentListRow
from app.schemas.equipment import EquipmentCreate


class EquipmentService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def list(self, status: str | EquipmentStatus | None = None) -> list[EquipmentListRow]:
        wanted = EquipmentStatus.parse(status) if status else None
        try:
            async with self._uow_factory() as uow:
                return await uow.equipment.list_with_workshop(status=wanted)
        except SQLAlchemyError as exc:
            # Unify DB errors as 503
            raise InfrastructureError("database unavailable") from exc

    async def create(self, payload: EquipmentCreate) -> EquipmentItem:
        try:
            async with self._uow_factory() as uow:
                if payload.workshop_id is not None:
                    if await uow.workshops.get(payload.workshop_id) is None:
                        raise NotFoundError(f"workshop {payload.workshop_id} not found")
                return await uow.equipment.create(
                    name=payload.name,
                    workshop_id=payload.workshop_id,
                    status=payload.status,
                    assigned_to=payload.assigned_to,
                    notes=payload.notes,
                )
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
