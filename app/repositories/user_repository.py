from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import NotificationPreference, User, UserRole


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, int(user_id))

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return (await self._session.scalars(stmt)).first()

    async def create(self, *, email: str, name: str, role: UserRole) -> User:
        user = User(email=email, name=name, role=role)
        self._session.add(user)
        await self._session.flush()
        return user

    async def list(self) -> list[User]:
        stmt = select(User).order_by(User.name.asc(), User.id.asc())
        return list((await self._session.scalars(stmt)).all())

    async def list_by_roles(self, roles: set[UserRole]) -> list[User]:
        stmt = select(User).where(User.role.in_(list(roles))).order_by(User.id.asc())
        return list((await self._session.scalars(stmt)).all())

    async def count_by_role(self, role: UserRole) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == role)
        return int((await self._session.execute(stmt)).scalar_one())

    async def set_role(self, user: User, role: UserRole) -> User:
        user.role = role
        await self._session.flush()
        return user

    async def delete(self, user: User) -> None:
        await self._session.execute(
            delete(NotificationPreference).where(NotificationPreference.user_id == user.id)
        )
        await self._session.delete(user)
        await self._session.flush()
