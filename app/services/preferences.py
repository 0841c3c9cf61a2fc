from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError, NotFoundError
from app.infra.unit_of_work import UnitOfWork
from app.models import PREFERENCE_FLAGS, NotificationPreference, User
from app.services.users import require_admin


def as_dict(user_id: int, pref: NotificationPreference | None) -> dict[str, int | bool]:
    """Flatten a preference row. A missing row means every flag is on."""
    out: dict[str, int | bool] = {"user_id": int(user_id)}
    for flag in PREFERENCE_FLAGS:
        out[flag] = True if pref is None else bool(getattr(pref, flag))
    return out


class PreferenceService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def get(self, actor: User, user_id: int | None = None) -> dict[str, int | bool]:
        target = _target(actor, user_id)
        try:
            async with self._uow_factory() as uow:
                if target != actor.id and await uow.users.get(target) is None:
                    raise NotFoundError(f"user {target} not found")
                pref = await uow.preferences.get(target)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return as_dict(target, pref)

    async def update(
        self, actor: User, values: dict[str, bool | None], user_id: int | None = None
    ) -> dict[str, int | bool]:
        target = _target(actor, user_id)
        changes = {k: bool(v) for k, v in values.items() if k in PREFERENCE_FLAGS and v is not None}
        try:
            async with self._uow_factory() as uow:
                if target != actor.id and await uow.users.get(target) is None:
                    raise NotFoundError(f"user {target} not found")
                pref = await uow.preferences.upsert(target, changes)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return as_dict(target, pref)


def _target(actor: User, user_id: int | None) -> int:
    if user_id is None or user_id == actor.id:
        return int(actor.id)
    require_admin(actor)
    return int(user_id)
