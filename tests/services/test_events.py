from __future__ import annotations

import logging

import pytest

from app.models import EquipmentStatus
from app.services.events import EquipmentStatusChanged, EventBus, WorkshopCreated


def _status_event() -> EquipmentStatusChanged:
    return EquipmentStatusChanged(
        equipment_id=1,
        equipment_name="Rope: 4",
        workshop_id=None,
        from_status=EquipmentStatus.ORDERED,
        to_status=EquipmentStatus.READY,
        actor_id=7,
    )


@pytest.mark.asyncio
async def test_publish_delivers_to_subscribers_of_that_type():
    bus = EventBus()
    seen: list[object] = []
    other: list[object] = []

    async def handler(event):
        seen.append(event)

    async def workshop_handler(event):
        other.append(event)

    bus.subscribe(EquipmentStatusChanged, handler)
    bus.subscribe(WorkshopCreated, workshop_handler)

    event = _status_event()
    bus.publish(event)
    await bus.drain()

    assert seen == [event]
    assert other == []


@pytest.mark.asyncio
async def test_failing_handler_is_logged_and_does_not_block_others(caplog):
    bus = EventBus()
    delivered: list[object] = []

    async def broken(event):
        raise RuntimeError("smtp down")

    async def working(event):
        delivered.append(event)

    bus.subscribe(EquipmentStatusChanged, broken)
    bus.subscribe(EquipmentStatusChanged, working)

    with caplog.at_level(logging.ERROR, logger="app.services.events"):
        bus.publish(_status_event())
        await bus.drain()

    assert len(delivered) == 1
    assert any(r.levelno == logging.ERROR for r in caplog.records)


@pytest.mark.asyncio
async def test_unsubscribe_and_publish_without_handlers():
    bus = EventBus()
    calls: list[object] = []

    async def handler(event):
        calls.append(event)

    bus.subscribe(EquipmentStatusChanged, handler)
    bus.unsubscribe(EquipmentStatusChanged, handler)
    bus.publish(_status_event())
    await bus.drain()

    assert calls == []
    assert bus.handlers_for(EquipmentStatusChanged) == []
