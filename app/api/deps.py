"""API dependency helpers and service providers."""

from fastapi import Depends, Header, Request

from app import db
from app.core.exceptions import UnauthorizedError
from app.infra.unit_of_work import SqlAlchemyUnitOfWork
from app.models import User
from app.services.app_settings import AppSettingService
from app.services.contacts import ContactService
from app.services.dashboard import DashboardService
from app.services.equipment_workflow import EquipmentWorkflowService
from app.services.equipments import EquipmentService
from app.services.events import EventBus
from app.services.preferences import PreferenceService
from app.services.processes import ProcessService
from app.services.reports import ReportService
from app.services.summaries import WorkshopSummaryService
from app.services.users import UserService, require_admin
from app.services.workshops import WorkshopService

__all__ = [
    "get_current_user",
    "get_event_bus",
    "get_admin_user",
    "get_contact_service",
    "get_dashboard_service",
    "get_equipment_service",
    "get_preference_service",
    "get_process_service",
    "get_report_service",
    "get_setting_service",
    "get_summary_service",
    "get_user_service",
    "get_workflow_service",
    "get_workshop_service",
]


# --- Service providers for DI ---


def _uow_factory() -> SqlAlchemyUnitOfWork:
    # Resolved per call: tests reconfigure app.db after import
    return SqlAlchemyUnitOfWork(db.SessionLocal)


def get_event_bus(request: Request) -> EventBus | None:
    return getattr(request.app.state, "events", None)


def get_user_service() -> UserService:
    return UserService(_uow_factory)


async def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    users: UserService = Depends(get_user_service),
) -> User:
    """Resolve the acting user from the ``X-User-Id`` header."""
    if not x_user_id:
        raise UnauthorizedError("authentication required")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise UnauthorizedError("invalid X-User-Id header") from None
    return await users.resolve_actor(user_id)


async def get_admin_user(user: User = Depends(get_current_user)) -> User:
    require_admin(user)
    return user


def get_workflow_service(
    events: EventBus | None = Depends(get_event_bus),
) -> EquipmentWorkflowService:
    return EquipmentWorkflowService(_uow_factory, events)


def get_equipment_service() -> EquipmentService:
    return EquipmentService(_uow_factory)


def get_workshop_service(
    events: EventBus | None = Depends(get_event_bus),
) -> WorkshopService:
    return WorkshopService(_uow_factory, events)


def get_process_service(
    events: EventBus | None = Depends(get_event_bus),
) -> ProcessService:
    return ProcessService(_uow_factory, events)


def get_report_service(
    events: EventBus | None = Depends(get_event_bus),
) -> ReportService:
    return ReportService(_uow_factory, events)


def get_preference_service() -> PreferenceService:
    return PreferenceService(_uow_factory)


def get_dashboard_service() -> DashboardService:
    return DashboardService(_uow_factory)




def get_contact_service() -> ContactService:
    return ContactService(_uow_factory)


def get_summary_service() -> WorkshopSummaryService:
    return WorkshopSummaryService(_uow_factory)


def get_setting_service() -> AppSettingService:
    return AppSettingService(_uow_factory)
