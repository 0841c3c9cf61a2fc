from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.infra.unit_of_work import UnitOfWork
from app.models import User, UserRole

logger = logging.getLogger(__name__)


def name_from_email(email: str) -> str:
    return email.split("@", 1)[0]


def require_admin(actor: User) -> None:
    if not actor.is_admin:
        raise ForbiddenError("admin role required")


async def check_instructor(uow: UnitOfWork, instructor_id: int | None) -> None:
    if instructor_id is not None and await uow.users.get(instructor_id) is None:
        raise ValidationError(f"instructor {instructor_id} does not exist")


class UserService:
    def __init__(
        self, uow_factory: Callable[[], UnitOfWork], settings: Settings | None = None
    ) -> None:
        self._uow_factory = uow_factory
        self._settings = settings or get_settings()

    def _is_super_admin(self, email: str) -> bool:
        configured = self._settings.super_admin_email
        return bool(configured) and configured.strip().lower() == email.strip().lower()

    async def login(self, email: str) -> User:
        """Find or create the user for *email*.

        The configured super admin is promoted to admin on every login.
        """

        email = email.strip()
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get_by_email(email)
                if user is None:
                    role = UserRole.admin if self._is_super_admin(email) else UserRole.instructor
                    user = await uow.users.create(
                        email=email.lower(), name=name_from_email(email), role=role
                    )
                    logger.info("user created", extra={"user_id": user.id, "role": role.value})
                elif self._is_super_admin(email) and user.role != UserRole.admin:
                    user = await uow.users.set_role(user, UserRole.admin)
                    logger.info("super admin promoted", extra={"user_id": user.id})
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return user

    async def resolve_actor(self, user_id: int | None) -> User:
        if user_id is None:
            raise UnauthorizedError("authentication required")
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get(user_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        if user is None:
            raise UnauthorizedError("unknown user")
        return user

    async def list(self) -> list[User]:
        try:
            async with self._uow_factory() as uow:
                return await uow.users.list()
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def change_role(self, actor: User, user_id: int, role: UserRole) -> User:
        require_admin(actor)
        if actor.id == user_id:
            raise ValidationError("cannot change your own role")
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get(user_id)
                if user is None:
                    raise NotFoundError(f"user {user_id} not found")
                user = await uow.users.set_role(user, role)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info(
            "user role changed",
            extra={"user_id": user_id, "role": role.value, "actor_id": actor.id},
        )
        return user

    async def delete(self, actor: User, user_id: int) -> None:
        require_admin(actor)
        if actor.id == user_id:
            raise ValidationError("cannot delete yourself")
        try:
            async with self._uow_factory() as uow:
                user = await uow.users.get(user_id)
                if user is None:
                    raise NotFoundError(f"user {user_id} not found")
                await uow.users.delete(user)
        except IntegrityError as exc:
            raise ConflictError("user still has monthly reports") from exc
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info("user deleted", extra={"user_id": user_id, "actor_id": actor.id})
