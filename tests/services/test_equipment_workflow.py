from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    InfrastructureError,
    InvalidStatusError,
    NotFoundError,
    TerminalStatusError,
    UnauthorizedError,
    ValidationError,
)
from app.models import EquipmentItem, EquipmentStatus, StatusEvent
from app.services.equipment_workflow import EquipmentWorkflowService
from app.services.events import EquipmentStatusChanged, EventBus

ACTOR = 7


class StubUnitOfWork:
    def __init__(self, equipment_repo):
        self.equipment = equipment_repo

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def commit(self) -> None:  # pragma: no cover - not used
        return None

    async def rollback(self) -> None:  # pragma: no cover - not used
        return None


class FakeEquipmentRepository:
    def __init__(self, items):
        self.items = {item.id: item for item in items}
        self.events: list[StatusEvent] = []

    async def get(self, item_id):
        return self.items.get(item_id)

    async def update_status(self, item, status):
        item.status = status
        return item

    async def append_status_event(self, *, equipment_id, from_status, to_status, changed_by_id, notes):
        event = StatusEvent(
            id=len(self.events) + 1,
            equipment_id=equipment_id,
            from_status=from_status,
            to_status=to_status,
            changed_by_id=changed_by_id,
            notes=notes,
        )
        self.events.append(event)
        return event

    async def list_events(self, item_id):
        return [e for e in reversed(self.events) if e.equipment_id == item_id]


class FailingEquipmentRepository(FakeEquipmentRepository):
    async def get(self, item_id):
        raise SQLAlchemyError("db error")


def _item(item_id: int, status: EquipmentStatus = EquipmentStatus.ORDERED) -> EquipmentItem:
    return EquipmentItem(id=item_id, name=f"Rope: {item_id}", workshop_id=None, status=status)


def _service(repo, events=None) -> EquipmentWorkflowService:
    return EquipmentWorkflowService(lambda: StubUnitOfWork(repo), events)


@pytest.mark.asyncio
async def test_advance_ordered_to_ready_appends_one_event():
    repo = FakeEquipmentRepository([_item(1)])

    change = await _service(repo).advance_status(1, ACTOR, notes="packed")

    assert change.item.status == EquipmentStatus.READY
    assert len(repo.events) == 1
    event = repo.events[0]
    assert (event.from_status, event.to_status) == (EquipmentStatus.ORDERED, EquipmentStatus.READY)
    assert event.changed_by_id == ACTOR
    assert event.notes == "packed"


@pytest.mark.asyncio
async def test_advance_walks_the_full_lifecycle():
    repo = FakeEquipmentRepository([_item(1)])
    svc = _service(repo)

    statuses = [(await svc.advance_status(1, ACTOR)).to_status for _ in range(3)]

    assert statuses == [EquipmentStatus.READY, EquipmentStatus.PICKED_UP, EquipmentStatus.RETURNED]
    assert len(repo.events) == 3


@pytest.mark.asyncio
async def test_advance_returned_item_is_rejected_without_event():
    repo = FakeEquipmentRepository([_item(1, EquipmentStatus.RETURNED)])

    with pytest.raises(TerminalStatusError):
        await _service(repo).advance_status(1, ACTOR)

    assert repo.items[1].status == EquipmentStatus.RETURNED
    assert repo.events == []


@pytest.mark.asyncio
async def test_advance_unknown_item_raises_not_found():
    with pytest.raises(NotFoundError):
        await _service(FakeEquipmentRepository([])).advance_status(5, ACTOR)


@pytest.mark.asyncio
async def test_set_status_bypasses_table_and_always_audits():
    repo = FakeEquipmentRepository([_item(1, EquipmentStatus.READY)])
    svc = _service(repo)

    back = await svc.set_status(1, "ORDERED", ACTOR)
    same = await svc.set_status(1, EquipmentStatus.ORDERED, ACTOR)

    assert back.item.status == EquipmentStatus.ORDERED
    assert same.from_status == same.to_status == EquipmentStatus.ORDERED
    assert len(repo.events) == 2


@pytest.mark.asyncio
async def test_set_status_rejects_unknown_value():
    repo = FakeEquipmentRepository([_item(1)])

    with pytest.raises(InvalidStatusError):
        await _service(repo).set_status(1, "LOST", ACTOR)

    assert repo.events == []


@pytest.mark.asyncio
async def test_status_change_requires_an_actor():
    repo = FakeEquipmentRepository([_item(1)])
    svc = _service(repo)

    with pytest.raises(UnauthorizedError):
        await svc.advance_status(1, None)
    with pytest.raises(UnauthorizedError):
        await svc.set_status(1, "READY", None)
    assert repo.events == []


@pytest.mark.asyncio
async def test_batch_continues_past_missing_ids():
    repo = FakeEquipmentRepository([_item(1), _item(3)])

    result = await _service(repo).batch_set_status([1, 2, 3], "READY", ACTOR)

    assert [r.id for r in result.items] == [1, 2, 3]
    assert result.success_ids == [1, 3]
    assert result.failure_ids == [2]
    assert result.items[1].error == "not_found"
    assert result.success_count == 2
    assert result.failure_count == 1
    assert repo.items[1].status == repo.items[3].status == EquipmentStatus.READY
    assert len(repo.events) == 2


@pytest.mark.asyncio
async def test_batch_requires_ids():
    with pytest.raises(ValidationError):
        await _service(FakeEquipmentRepository([])).batch_set_status([], "READY", ACTOR)


@pytest.mark.asyncio
async def test_batch_rejects_invalid_status_before_touching_items():
    repo = FakeEquipmentRepository([_item(1)])

    with pytest.raises(InvalidStatusError):
        await _service(repo).batch_set_status([1], "ready-ish", ACTOR)

    assert repo.items[1].status == EquipmentStatus.ORDERED
    assert repo.events == []


@pytest.mark.asyncio
async def test_batch_advance_reports_terminal_items():
    repo = FakeEquipmentRepository([_item(1), _item(2, EquipmentStatus.RETURNED)])

    result = await _service(repo).batch_advance([1, 2], ACTOR)

    assert result.success_ids == [1]
    assert result.items[1].error == "terminal_status"
    assert repo.items[1].status == EquipmentStatus.READY


@pytest.mark.asyncio
async def test_list_events_newest_first():
    repo = FakeEquipmentRepository([_item(1)])
    svc = _service(repo)
    await svc.advance_status(1, ACTOR)
    await svc.advance_status(1, ACTOR)

    events = await svc.list_events(1)

    assert [e.to_status for e in events] == [EquipmentStatus.PICKED_UP, EquipmentStatus.READY]
    with pytest.raises(NotFoundError):
        await svc.list_events(99)


@pytest.mark.asyncio
async def test_database_errors_surface_as_infrastructure_error():
    with pytest.raises(InfrastructureError):
        await _service(FailingEquipmentRepository([])).advance_status(1, ACTOR)


@pytest.mark.asyncio
async def test_status_change_is_published_after_commit():
    bus = EventBus()
    received: list[EquipmentStatusChanged] = []

    async def handler(event):
        received.append(event)

    bus.subscribe(EquipmentStatusChanged, handler)
    repo = FakeEquipmentRepository([_item(1)])

    await _service(repo, bus).advance_status(1, ACTOR)
    await bus.drain()

    assert len(received) == 1
    assert received[0].equipment_name == "Rope: 1"
    assert received[0].to_status == EquipmentStatus.READY
    assert received[0].actor_id == ACTOR


@pytest.mark.asyncio
async def test_failing_subscriber_never_undoes_the_change():
    bus = EventBus()

    async def broken(event):
        raise RuntimeError("mail server unreachable")

    bus.subscribe(EquipmentStatusChanged, broken)
    repo = FakeEquipmentRepository([_item(1)])

    change = await _service(repo, bus).advance_status(1, ACTOR)
    await bus.drain()

    assert change.item.status == EquipmentStatus.READY
    assert repo.items[1].status == EquipmentStatus.READY
    assert len(repo.events) == 1


class FlakyEquipmentRepository(FakeEquipmentRepository):
    def __init__(self, items, broken_id):
        super().__init__(items)
        self.broken_id = broken_id

    async def get(self, item_id):
        if item_id == self.broken_id:
            raise OverflowError("id out of range")
        return await super().get(item_id)


@pytest.mark.asyncio
async def test_batch_keeps_going_after_unexpected_error():
    repo = FlakyEquipmentRepository([_item(1), _item(2), _item(3)], broken_id=2)

    result = await _service(repo).batch_set_status([1, 2, 3], "READY", ACTOR)

    assert result.success_ids == [1, 3]
    assert result.failure_ids == [2]
    assert result.items[1].error == "unavailable"
    assert repo.items[3].status == EquipmentStatus.READY
    assert repo.items[2].status == EquipmentStatus.ORDERED
