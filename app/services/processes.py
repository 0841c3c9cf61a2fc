from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    ConflictError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from app.infra.unit_of_work import UnitOfWork
from app.models import Process
from app.schemas.process import ProcessCreate, ProcessUpdate
from app.services.events import EventBus, ProcessAssigned
from app.services.users import check_instructor

logger = logging.getLogger(__name__)


class ProcessService:
    """CRUD for client processes.

    Setting or changing the instructor publishes ``ProcessAssigned``.
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork], events: EventBus | None = None):
        self._uow_factory = uow_factory
        self._events = events

    async def list(self) -> list[Process]:
        try:
            async with self._uow_factory() as uow:
                return await uow.processes.list()
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def get(self, process_id: int) -> Process:
        try:
            async with self._uow_factory() as uow:
                process = await uow.processes.get(process_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        if process is None:
            raise NotFoundError(f"process {process_id} not found")
        return process

    async def create(self, payload: ProcessCreate) -> Process:
        try:
            async with self._uow_factory() as uow:
                await check_instructor(uow, payload.instructor_id)
                process = await uow.processes.create(**payload.model_dump())
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info("process created", extra={"process_id": process.id, "type": process.type.value})
        if process.instructor_id is not None:
            self._assigned(process)
        return process

    async def update(self, process_id: int, payload: ProcessUpdate) -> Process:
        changes = payload.model_dump(exclude_unset=True)
        for key in ("name", "type", "status", "client_name"):
            if key in changes and changes[key] is None:
                raise ValidationError(f"{key} cannot be null")
        try:
            async with self._uow_factory() as uow:
                process = await uow.processes.get(process_id)
                if process is None:
                    raise NotFoundError(f"process {process_id} not found")
                previous_instructor = process.instructor_id
                if "instructor_id" in changes:
                    await check_instructor(uow, changes["instructor_id"])
                process = await uow.processes.update(process, changes)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        if process.instructor_id is not None and process.instructor_id != previous_instructor:
            self._assigned(process)
        return process

    async def delete(self, process_id: int) -> None:
        try:
            async with self._uow_factory() as uow:
                process = await uow.processes.get(process_id)
                if process is None:
                    raise NotFoundError(f"process {process_id} not found")
                if await uow.processes.count_workshops(process_id):
                    raise ConflictError("process still has workshops")
                await uow.processes.delete(process)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info("process deleted", extra={"process_id": process_id})

    def _assigned(self, process: Process) -> None:
        if self._events is None:
            return
        try:
            self._events.publish(
                ProcessAssigned(process_id=process.id, instructor_id=int(process.instructor_id))
            )
        except Exception:
            logger.exception("failed to dispatch process assignment notification")
