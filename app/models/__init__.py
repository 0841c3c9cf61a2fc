# Importing every model here lets Alembic and create_all see the full metadata
# app/models/__init__.py
from .app_setting import AppSetting
from .base import Base
from .client_contact import ClientContact, ContactRole
from .equipment_item import NEXT_STATUS, EquipmentItem, EquipmentStatus
from .monthly_report import MonthlyReport
from .notification_preference import PREFERENCE_FLAGS, NotificationPreference
from .process import Process, ProcessStatus, ProcessType
from .status_event import StatusEvent
from .user import User, UserRole
from .workshop import Workshop, WorkshopStatus
from .workshop_summary import WorkshopSummary

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Process",
    "ProcessType",
    "ProcessStatus",
    "Workshop",
    "WorkshopStatus",
    "WorkshopSummary",
    "EquipmentItem",
    "EquipmentStatus",
    "NEXT_STATUS",
    "StatusEvent",
    "MonthlyReport",
    "NotificationPreference",
    "PREFERENCE_FLAGS",
    "ClientContact",
    "ContactRole",
    "AppSetting",
]
