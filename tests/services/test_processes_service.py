from __future__ import annotations

import pytest

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import ProcessType, UserRole
from app.schemas.process import ProcessCreate, ProcessUpdate
from app.services.events import ProcessAssigned
from app.services.processes import ProcessService


class RecordingBus:
    def __init__(self) -> None:
        self.published: list[object] = []

    def publish(self, event) -> None:
        self.published.append(event)


async def _instructor(uow_factory, email="dana@example.com"):
    async with uow_factory() as uow:
        return await uow.users.create(email=email, name="Dana", role=UserRole.instructor)


@pytest.mark.asyncio
async def test_create_with_instructor_publishes_assignment(uow_factory):
    dana = await _instructor(uow_factory)
    bus = RecordingBus()
    svc = ProcessService(uow_factory, bus)

    process = await svc.create(
        ProcessCreate(name="Leadership", type=ProcessType.odt, client_name="Acme", instructor_id=dana.id)
    )

    assert bus.published == [ProcessAssigned(process_id=process.id, instructor_id=dana.id)]


@pytest.mark.asyncio
async def test_update_publishes_only_when_instructor_changes(uow_factory):
    dana = await _instructor(uow_factory)
    bus = RecordingBus()
    svc = ProcessService(uow_factory, bus)
    process = await svc.create(ProcessCreate(name="Course", type=ProcessType.course, client_name="Acme"))
    assert bus.published == []

    await svc.update(process.id, ProcessUpdate(description="week one"))
    assert bus.published == []

    await svc.update(process.id, ProcessUpdate(instructor_id=dana.id))
    await svc.update(process.id, ProcessUpdate(instructor_id=dana.id))
    assert len(bus.published) == 1


@pytest.mark.asyncio
async def test_unknown_instructor_is_rejected(uow_factory):
    svc = ProcessService(uow_factory)
    with pytest.raises(ValidationError):
        await svc.create(
            ProcessCreate(name="X", type=ProcessType.coaching, client_name="Acme", instructor_id=404)
        )


@pytest.mark.asyncio
async def test_delete_refuses_while_workshops_reference_process(uow_factory):
    svc = ProcessService(uow_factory)
    process = await svc.create(ProcessCreate(name="Day", type=ProcessType.workshop, client_name="Acme"))
    async with uow_factory() as uow:
        await uow.workshops.create(title="Session 1", process_id=process.id)

    with pytest.raises(ConflictError):
        await svc.delete(process.id)
    with pytest.raises(NotFoundError):
        await svc.delete(process.id + 100)
