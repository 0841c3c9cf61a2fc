"""In-process domain events and the bus that delivers them.

The bus is an explicit object owned by the application (``app.state.events``)
and handed to the services that publish. Delivery is fire-and-forget: each
handler runs in its own task and a failing handler is logged, never raised
back to the publisher.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from app.models.equipment_item import EquipmentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    pass


@dataclass(frozen=True)
class EquipmentStatusChanged(DomainEvent):
    equipment_id: int
    equipment_name: str
    workshop_id: int | None
    from_status: EquipmentStatus | None
    to_status: EquipmentStatus
    actor_id: int
    notes: str | None = None


@dataclass(frozen=True)
class WorkshopCreated(DomainEvent):
    workshop_id: int
    actor_id: int | None


@dataclass(frozen=True)
class WorkshopUpdated(DomainEvent):
    workshop_id: int
    actor_id: int | None


@dataclass(frozen=True)
class WorkshopCancelled(DomainEvent):
    workshop_id: int
    actor_id: int | None


@dataclass(frozen=True)
class ProcessAssigned(DomainEvent):
    process_id: int
    instructor_id: int


@dataclass(frozen=True)
class ReportApproved(DomainEvent):
    report_id: int
    approved_by_id: int


@dataclass(frozen=True)
class MonthlyReportDue(DomainEvent):
    instructor_id: int
    month: int
    year: int


Handler = Callable[[Any], Awaitable[None]]


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: type[DomainEvent]) -> list[Handler]:
        return list(self._handlers.get(event_type, ()))

    def publish(self, event: DomainEvent) -> None:
        """Schedule every subscriber of ``type(event)`` and return immediately."""

        for handler in self.handlers_for(type(event)):
            task = asyncio.get_running_loop().create_task(self._deliver(handler, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _deliver(self, handler: Handler, event: DomainEvent) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception(
                "event handler failed",
                extra={
                    "event_type": type(event).__name__,
                    "handler": getattr(handler, "__qualname__", repr(handler)),
                },
            )

    async def drain(self) -> None:
        """Wait for deliveries that are still in flight."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


__all__ = [
    "DomainEvent",
    "EquipmentStatusChanged",
    "EventBus",
    "MonthlyReportDue",
    "ProcessAssigned",
    "ReportApproved",
    "WorkshopCancelled",
    "WorkshopCreated",
    "WorkshopUpdated",
]
