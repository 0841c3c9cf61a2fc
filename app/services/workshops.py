"""Workshop booking: persistence plus equipment materialisation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError, NotFoundError, ValidationError
from app.infra.unit_of_work import UnitOfWork
from app.models import EquipmentItem, EquipmentStatus, User, Workshop, WorkshopStatus
from app.services.catalog import ExerciseCatalog, get_catalog
from app.services.equipment_manifest import EquipmentTotal, build_exercise_manifest, clamp_groups
from app.services.events import (
    DomainEvent,
    EventBus,
    WorkshopCancelled,
    WorkshopCreated,
    WorkshopUpdated,
)
from app.schemas.workshop import ExerciseSelection, WorkshopCreate, WorkshopUpdate
from app.services.users import check_instructor

logger = logging.getLogger(__name__)

# Columns that are NOT NULL on the workshop row
REQUIRED_FIELDS = ("title", "status", "checklist")


def default_title(location: str | None) -> str:
    return f"Workshop - {location or 'New'}"


def build_selection_manifest(
    catalog: ExerciseCatalog, selection: ExerciseSelection
) -> list[EquipmentTotal]:
    try:
        exercise = catalog.get_exercise(selection.exercise_id)
    except NotFoundError as exc:
        raise ValidationError(str(exc)) from None
    return build_exercise_manifest(exercise, selection.sub_activity_ids, selection.num_groups)


class WorkshopService:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        events: EventBus | None = None,
        catalog: ExerciseCatalog | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._events = events
        self._catalog = catalog

    @property
    def catalog(self) -> ExerciseCatalog:
        if self._catalog is None:
            self._catalog = get_catalog()
        return self._catalog

    async def list(self, process_id: int | None = None) -> list[Workshop]:
        try:
            async with self._uow_factory() as uow:
                if process_id is not None and await uow.processes.get(process_id) is None:
                    raise NotFoundError(f"process {process_id} not found")
                return await uow.workshops.list(process_id=process_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def get(self, workshop_id: int) -> Workshop:
        try:
            async with self._uow_factory() as uow:
                workshop = await uow.workshops.get(workshop_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        if workshop is None:
            raise NotFoundError(f"workshop {workshop_id} not found")
        return workshop

    async def create(self, payload: WorkshopCreate, actor: User) -> Workshop:
        """Book a workshop and order the equipment for its exercises.

        Every selected exercise is expanded into equipment totals; each total
        becomes one ORDERED item named ``"<item>: <total>"``.
        """

        # Build manifests before touching the database so a bad selection writes nothing
        manifests = [
            (selection, build_selection_manifest(self.catalog, selection))
            for selection in payload.exercises
        ]
        summaries: list[dict[str, Any]] = [
            {
                "exercise_id": selection.exercise_id,
                "equipment": [total.display_name for total in totals],
                "notes": selection.notes,
                "num_groups": clamp_groups(selection.num_groups),
            }
            for selection, totals in manifests
        ]

        fields = payload.model_dump(exclude={"exercises"})
        fields["title"] = payload.title or default_title(payload.location)
        fields["exercises"] = summaries
        if fields.get("instructor_id") is None:
            fields["instructor_id"] = actor.id

        try:
            async with self._uow_factory() as uow:
                if payload.process_id is not None:
                    process = await uow.processes.get(payload.process_id)
                    if process is None:
                        raise NotFoundError(f"process {payload.process_id} not found")
                    if not fields.get("client_name"):
                        fields["client_name"] = process.client_name
                await check_instructor(uow, fields.get("instructor_id"))
                workshop = await uow.workshops.create(**fields)
                ordered = 0
                for _, totals in manifests:
                    for total in totals:
                        await uow.equipment.create(
                            name=total.display_name,
                            workshop_id=workshop.id,
                            status=EquipmentStatus.ORDERED,
                        )
                        ordered += 1
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info(
            "workshop created",
            extra={"workshop_id": workshop.id, "equipment_items": ordered, "actor_id": actor.id},
        )
        self._publish(WorkshopCreated(workshop_id=workshop.id, actor_id=actor.id))
        return workshop

    async def update(self, workshop_id: int, payload: WorkshopUpdate, actor: User) -> Workshop:
        changes = payload.model_dump(exclude_unset=True)
        for key in REQUIRED_FIELDS:
            if key in changes and changes[key] is None:
                raise ValidationError(f"{key} cannot be null")
        try:
            async with self._uow_factory() as uow:
                workshop = await uow.workshops.get(workshop_id)
                if workshop is None:
                    raise NotFoundError(f"workshop {workshop_id} not found")
                if changes.get("process_id") is not None:
                    if await uow.processes.get(changes["process_id"]) is None:
                        raise NotFoundError(f"process {changes['process_id']} not found")
                if "instructor_id" in changes:
                    await check_instructor(uow, changes["instructor_id"])
                was_cancelled = workshop.status == WorkshopStatus.cancelled
                workshop = await uow.workshops.update(workshop, changes)
                cancelled_now = workshop.status == WorkshopStatus.cancelled and not was_cancelled
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        event: DomainEvent
        if cancelled_now:
            event = WorkshopCancelled(workshop_id=workshop.id, actor_id=actor.id)
        else:
            event = WorkshopUpdated(workshop_id=workshop.id, actor_id=actor.id)
        logger.info(
            "workshop updated",
            extra={"workshop_id": workshop.id, "fields": sorted(changes), "cancelled": cancelled_now},
        )
        self._publish(event)
        return workshop

    async def delete(self, workshop_id: int) -> None:
        """Delete a workshop with its summary, its equipment items and their status events."""

        try:
            async with self._uow_factory() as uow:
                if await uow.workshops.get(workshop_id) is None:
                    raise NotFoundError(f"workshop {workshop_id} not found")
                removed = await uow.equipment.delete_by_workshop(workshop_id)
                await uow.summaries.delete_by_workshop(workshop_id)
                await uow.workshops.delete(workshop_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info("workshop deleted", extra={"workshop_id": workshop_id, "equipment_items": removed})

    async def list_equipment(self, workshop_id: int) -> list[EquipmentItem]:
        try:
            async with self._uow_factory() as uow:
                if await uow.workshops.get(workshop_id) is None:
                    raise NotFoundError(f"workshop {workshop_id} not found")
                return await uow.equipment.list_by_workshop(workshop_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    def _publish(self, event: DomainEvent) -> None:
        if self._events is None:
            return
        try:
            self._events.publish(event)
        except Exception:
            logger.exception("failed to dispatch workshop notification")
