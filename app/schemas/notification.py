from __future__ import annotations

from pydantic import BaseModel


class NotificationPreferencesOut(BaseModel):
    user_id: int
    on_workshop_created: bool = True
    on_workshop_updated: bool = True
    on_workshop_cancelled: bool = True
    on_equipment_status_changed: bool = True
    on_equipment_ready: bool = True
    on_monthly_report_due: bool = True
    on_report_approved: bool = True
    on_process_assigned: bool = True


class NotificationPreferencesUpdate(BaseModel):
    on_workshop_created: bool | None = None
    on_workshop_updated: bool | None = None
    on_workshop_cancelled: bool | None = None
    on_equipment_status_changed: bool | None = None
    on_equipment_ready: bool | None = None
    on_monthly_report_due: bool | None = None
    on_report_approved: bool | None = None
    on_process_assigned: bool | None = None
