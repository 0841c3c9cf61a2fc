from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.models.base import Base, JSONType, utcnow


class WorkshopStatus(str, Enum):
    planned = "planned"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class Workshop(Base):
    """A single scheduled session.

    ``exercises`` keeps the booking-time summary of each selected exercise:
    ``{"exercise_id", "equipment": ["<item>: <total>", ...], "notes", "num_groups"}``.
    ``checklist`` maps logistics keys (assistant, medic, lunch, ...) to "yes"/"no".
    """

    __tablename__ = "workshops"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    process_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("processes.id"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[WorkshopStatus] = mapped_column(
        SQLEnum(WorkshopStatus, name="workshop_status"),
        nullable=False,
        default=WorkshopStatus.planned,
    )
    client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hr_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hr_contact_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    hr_contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    procurement_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    procurement_contact_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    procurement_contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    checklist: Mapped[dict[str, str]] = mapped_column(JSONType, nullable=False, default=dict)
    exercises: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
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
