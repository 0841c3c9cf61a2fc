"""After-action workshop summaries, one per workshop, saved by upsert."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError, NotFoundError, ValidationError
from app.infra.unit_of_work import UnitOfWork
from app.models import User, WorkshopSummary
from app.schemas.summary import WorkshopSummaryIn

logger = logging.getLogger(__name__)


def validate_summary(payload: WorkshopSummaryIn) -> dict:
    if payload.participants_count <= 0:
        raise ValidationError("participants_count must be greater than 0")
    details = (payload.safety_details or "").strip()
    if payload.safety_incident and not details:
        raise ValidationError("safety_details is required when a safety incident is reported")
    fields = payload.model_dump()
    fields["safety_details"] = details if payload.safety_incident else None
    return fields


class WorkshopSummaryService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def get(self, workshop_id: int) -> WorkshopSummary | None:
        try:
            async with self._uow_factory() as uow:
                if await uow.workshops.get(workshop_id) is None:
                    raise NotFoundError(f"workshop {workshop_id} not found")
                return await uow.summaries.get(workshop_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def save(
        self, workshop_id: int, payload: WorkshopSummaryIn, actor: User
    ) -> tuple[WorkshopSummary, bool]:
        """Create or replace the workshop's summary. Returns ``(summary, created)``."""

        fields = validate_summary(payload)
        fields["submitted_by_id"] = actor.id
        try:
            async with self._uow_factory() as uow:
                if await uow.workshops.get(workshop_id) is None:
                    raise NotFoundError(f"workshop {workshop_id} not found")
                existing = await uow.summaries.get(workshop_id)
                if existing is None:
                    summary = await uow.summaries.create(workshop_id, **fields)
                else:
                    summary = await uow.summaries.update(existing, fields)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info(
            "workshop summary saved",
            extra={
                "workshop_id": workshop_id,
                "created": existing is None,
                "safety_incident": payload.safety_incident,
            },
        )
        return summary, existing is None
