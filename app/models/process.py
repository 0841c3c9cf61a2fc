from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.models.base import Base, utcnow


class ProcessType(str, Enum):
    workshop = "workshop"
    course = "course"
    odt = "odt"
    coaching = "coaching"
    consulting = "consulting"
    facilitation = "facilitation"


class ProcessStatus(str, Enum):
    active = "active"
    completed = "completed"
    cancelled = "cancelled"
    on_hold = "on_hold"


class Process(Base):
    """A client engagement that one or more workshops belong to."""

    __tablename__ = "processes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[ProcessType] = mapped_column(
        SQLEnum(ProcessType, name="process_type"), nullable=False
    )
    status: Mapped[ProcessStatus] = mapped_column(
        SQLEnum(ProcessStatus, name="process_status"),
        nullable=False,
        default=ProcessStatus.active,
        index=True,
    )
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    instructor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
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
