from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.models.base import Base, utcnow
from app.models.equipment_item import EquipmentStatus


class StatusEvent(Base):
    """Audit record of one equipment status change.

    Rows are append-only: never updated, deleted only together with the
    owning workshop's equipment.
    """

    __tablename__ = "status_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    equipment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("equipment_items.id"), nullable=False, index=True
    )
    from_status: Mapped[EquipmentStatus | None] = mapped_column(
        SQLEnum(EquipmentStatus, name="equipment_status"), nullable=True
    )
    to_status: Mapped[EquipmentStatus] = mapped_column(
        SQLEnum(EquipmentStatus, name="equipment_status"), nullable=False
    )
    changed_by_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # NOTE: no updated_at, events are never edited
