"""Equipment status workflow: ORDERED -> READY -> PICKED_UP -> RETURNED.

Every status mutation appends exactly one ``StatusEvent`` in the same
transaction as the status update. Notifications go out through the event bus
after the commit and can never undo or fail the change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    DomainError,
    InfrastructureError,
    NotFoundError,
    TerminalStatusError,
    UnauthorizedError,
    ValidationError,
)
from app.infra.unit_of_work import UnitOfWork
from app.models import EquipmentItem, EquipmentStatus, StatusEvent
from app.services.events import EquipmentStatusChanged, EventBus

logger = logging.getLogger(__name__)

UowFactory = Callable[[], UnitOfWork]


@dataclass
class StatusChange:
    item: EquipmentItem
    event: StatusEvent

    @property
    def from_status(self) -> EquipmentStatus | None:
        return self.event.from_status

    @property
    def to_status(self) -> EquipmentStatus:
        return self.event.to_status


@dataclass
class BatchItemResult:
    id: int
    ok: bool
    item: EquipmentItem | None = None
    error: str | None = None


@dataclass
class BatchResult:
    items: list[BatchItemResult] = field(default_factory=list)

    @property
    def success_ids(self) -> list[int]:
        return [r.id for r in self.items if r.ok]

    @property
    def failure_ids(self) -> list[int]:
        return [r.id for r in self.items if not r.ok]

    @property
    def success_count(self) -> int:
        return len(self.success_ids)

    @property
    def failure_count(self) -> int:
        return len(self.failure_ids)


def _error_code(exc: DomainError) -> str:
    if isinstance(exc, NotFoundError):
        return "not_found"
    if isinstance(exc, TerminalStatusError):
        return "terminal_status"
    if isinstance(exc, InfrastructureError):
        return "unavailable"
    return str(exc) or exc.__class__.__name__


def _require_actor(actor_id: int | None) -> int:
    if actor_id is None:
        raise UnauthorizedError("an authenticated user is required to change equipment status")
    return int(actor_id)


class EquipmentWorkflowService:
    def __init__(self, uow_factory: UowFactory, events: EventBus | None = None) -> None:
        self._uow_factory = uow_factory
        self._events = events

    async def advance_status(
        self, item_id: int, actor_id: int | None, notes: str | None = None
    ) -> StatusChange:
        """Move the item one step along the next-status table."""

        actor = _require_actor(actor_id)
        return await self._change(item_id, None, actor, notes)

    async def set_status(
        self,
        item_id: int,
        status: str | EquipmentStatus,
        actor_id: int | None,
        notes: str | None = None,
    ) -> StatusChange:
        """Set an explicit status, bypassing the next-status table."""

        actor = _require_actor(actor_id)
        target = EquipmentStatus.parse(status)
        return await self._change(item_id, target, actor, notes)

    async def batch_set_status(
        self, ids: Sequence[int], status: str | EquipmentStatus, actor_id: int | None
    ) -> BatchResult:
        actor = _require_actor(actor_id)
        target = EquipmentStatus.parse(status)
        return await self._batch(ids, target, actor, None)

    async def batch_advance(
        self, ids: Sequence[int], actor_id: int | None, notes: str | None = None
    ) -> BatchResult:
        actor = _require_actor(actor_id)
        return await self._batch(ids, None, actor, notes)

    async def list_events(self, item_id: int) -> list[StatusEvent]:
        try:
            async with self._uow_factory() as uow:
                item = await uow.equipment.get(item_id)
                if item is None:
                    raise NotFoundError(f"equipment {item_id} not found")
                return await uow.equipment.list_events(item_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def _batch(
        self,
        ids: Sequence[int],
        target: EquipmentStatus | None,
        actor: int,
        notes: str | None,
    ) -> BatchResult:
        if not ids:
            raise ValidationError("ids required")

        result = BatchResult()
        # One transaction per id so a failure never rolls back its neighbours
        for item_id in ids:
            try:
                change = await self._change(item_id, target, actor, notes)
            except DomainError as exc:
                result.items.append(BatchItemResult(id=item_id, ok=False, error=_error_code(exc)))
                continue
            except Exception:
                logger.exception("equipment batch item failed", extra={"equipment_id": item_id})
                result.items.append(BatchItemResult(id=item_id, ok=False, error="unavailable"))
                continue
            result.items.append(BatchItemResult(id=item_id, ok=True, item=change.item))

        logger.info(
            "equipment batch status update",
            extra={
                "target": target.value if target else "next",
                "success_ids": result.success_ids,
                "failure_ids": result.failure_ids,
                "actor_id": actor,
            },
        )
        return result

    async def _change(
        self,
        item_id: int,
        target: EquipmentStatus | None,
        actor: int,
        notes: str | None,
    ) -> StatusChange:
        try:
            async with self._uow_factory() as uow:
                item = await uow.equipment.get(item_id)
                if item is None:
                    raise NotFoundError(f"equipment {item_id} not found")
                current = EquipmentStatus(item.status)
                if target is None:
                    target = current.next
                    if target is None:
                        raise TerminalStatusError(
                            f"equipment {item_id} is already {current.value}"
                        )
                event = await uow.equipment.append_status_event(
                    equipment_id=item.id,
                    from_status=current,
                    to_status=target,
                    changed_by_id=actor,
                    notes=notes,
                )
                item = await uow.equipment.update_status(item, target)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info(
            "equipment status changed",
            extra={
                "equipment_id": item.id,
                "from_status": current.value,
                "to_status": target.value,
                "actor_id": actor,
            },
        )
        self._publish(
            EquipmentStatusChanged(
                equipment_id=item.id,
                equipment_name=item.name,
                workshop_id=item.workshop_id,
                from_status=current,
                to_status=target,
                actor_id=actor,
                notes=notes,
            )
        )
        return StatusChange(item=item, event=event)

    def _publish(self, event: EquipmentStatusChanged) -> None:
        if self._events is None:
            return
        try:
            self._events.publish(event)
        except Exception:
            logger.exception("failed to dispatch equipment status notification")


__all__ = [
    "BatchItemResult",
    "BatchResult",
    "EquipmentWorkflowService",
    "StatusChange",
]
