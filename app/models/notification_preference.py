from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func

from app.models.base import Base, utcnow

PREFERENCE_FLAGS: tuple[str, ...] = (
    "on_workshop_created",
    "on_workshop_updated",
    "on_workshop_cancelled",
    "on_equipment_status_changed",
    "on_equipment_ready",
    "on_monthly_report_due",
    "on_report_approved",
    "on_process_assigned",
)


class NotificationPreference(Base):
    """Per-user email opt-outs. A missing row means every flag is on."""

    __tablename__ = "notification_preferences"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    on_workshop_created = Column(Boolean, nullable=False, default=True)
    on_workshop_updated = Column(Boolean, nullable=False, default=True)
    on_workshop_cancelled = Column(Boolean, nullable=False, default=True)
    on_equipment_status_changed = Column(Boolean, nullable=False, default=True)
    on_equipment_ready = Column(Boolean, nullable=False, default=True)
    on_monthly_report_due = Column(Boolean, nullable=False, default=True)
    on_report_approved = Column(Boolean, nullable=False, default=True)
    on_process_assigned = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )
