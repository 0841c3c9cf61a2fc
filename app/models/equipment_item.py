from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.core.exceptions import InvalidStatusError
from app.models.base import Base, utcnow


class EquipmentStatus(str, Enum):
    ORDERED = "ORDERED"
    READY = "READY"
    PICKED_UP = "PICKED_UP"
    RETURNED = "RETURNED"

    @classmethod
    def parse(cls, value: str | EquipmentStatus) -> EquipmentStatus:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(f"invalid equipment status: {value!r}") from None

    @property
    def next(self) -> EquipmentStatus | None:
        return NEXT_STATUS.get(self)


NEXT_STATUS: dict[EquipmentStatus, EquipmentStatus] = {
    EquipmentStatus.ORDERED: EquipmentStatus.READY,
    EquipmentStatus.READY: EquipmentStatus.PICKED_UP,
    EquipmentStatus.PICKED_UP: EquipmentStatus.RETURNED,
}


class EquipmentItem(Base):
    __tablename__ = "equipment_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Display name, e.g. "Rope: 4"
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    workshop_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("workshops.id"), nullable=True, index=True
    )
    status: Mapped[EquipmentStatus] = mapped_column(
        SQLEnum(EquipmentStatus, name="equipment_status"),
        nullable=False,
        default=EquipmentStatus.ORDERED,
        index=True,
    )
    assigned_to: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
