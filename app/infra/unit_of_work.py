"""Unit of Work abstraction used by the service layer."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories.contact_repository import ClientContactRepository
from app.repositories.equipment_repository import SqlAlchemyEquipmentRepository
from app.repositories.interfaces import EquipmentRepository
from app.repositories.notification_repository import NotificationPreferenceRepository
from app.repositories.process_repository import ProcessRepository
from app.repositories.report_repository import MonthlyReportRepository
from app.repositories.settings_repository import AppSettingRepository
from app.repositories.summary_repository import WorkshopSummaryRepository
from app.repositories.user_repository import UserRepository
from app.repositories.workshop_repository import WorkshopRepository


class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Defines the repository boundary exposed to services."""

    equipment: EquipmentRepository
    users: UserRepository
    processes: ProcessRepository
    workshops: WorkshopRepository
    reports: MonthlyReportRepository
    preferences: NotificationPreferenceRepository
    contacts: ClientContactRepository
    summaries: WorkshopSummaryRepository
    settings: AppSettingRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of Work backed by SQLAlchemy async sessions.

    Leaving the context commits, or rolls back when an exception escapes.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        session = self._session_factory()
        self._session = session
        self.equipment = SqlAlchemyEquipmentRepository(session)
        self.users = UserRepository(session)
        self.processes = ProcessRepository(session)
        self.workshops = WorkshopRepository(session)
        self.reports = MonthlyReportRepository(session)
        self.preferences = NotificationPreferenceRepository(session)
        self.contacts = ClientContactRepository(session)
        self.summaries = WorkshopSummaryRepository(session)
        self.settings = AppSettingRepository(session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is None:
            return
        try:
            if exc_type:
                await self._session.rollback()
            else:
                await self._session.commit()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork session is not initialized. Use within context manager.")
        return self._session
