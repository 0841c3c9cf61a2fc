from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError
from app.infra.unit_of_work import UnitOfWork
from app.models import User
from app.services.users import require_admin


class AppSettingService:
    """Free-form key/value settings. Unknown keys read as ``None``."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def get(self, key: str) -> dict[str, str | None]:
        try:
            async with self._uow_factory() as uow:
                setting = await uow.settings.get(key)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return {"key": key, "value": setting.value if setting else None}

    async def set(self, actor: User, key: str, value: str | None) -> dict[str, str | None]:
        require_admin(actor)
        try:
            async with self._uow_factory() as uow:
                setting = await uow.settings.set(key, value)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return {"key": key, "value": setting.value}
