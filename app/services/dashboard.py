from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError
from app.infra.unit_of_work import UnitOfWork
from app.models import UserRole


class DashboardService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def summary(self) -> dict:
        try:
            async with self._uow_factory() as uow:
                total_processes, active_processes = await uow.processes.counts()
                total_workshops = await uow.workshops.count()
                by_status = await uow.equipment.count_by_status()
                instructors = await uow.users.count_by_role(UserRole.instructor)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return {
            "total_processes": total_processes,
            "active_processes": active_processes,
            "total_workshops": total_workshops,
            "total_equipment": sum(by_status.values()),
            "equipment_by_status": {status.value: count for status, count in by_status.items()},
            "total_instructors": instructors,
        }
