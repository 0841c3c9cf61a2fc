from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from app.models.base import Base, JSONType, utcnow


class WorkshopSummary(Base):
    """The instructor's after-action summary. At most one per workshop."""

    __tablename__ = "workshop_summaries"

    id = Column(Integer, primary_key=True)
    workshop_id = Column(Integer, ForeignKey("workshops.id"), nullable=False, unique=True)
    participants_count = Column(Integer, nullable=False)
    # Names of the exercises actually run on the day
    actual_exercises = Column(JSONType, nullable=False, default=list)
    instructor_insight = Column(Text, nullable=True)
    day_insight = Column(Text, nullable=True)
    safety_incident = Column(Boolean, nullable=False, default=False)
    safety_details = Column(Text, nullable=True)
    issues_or_exceptions = Column(Text, nullable=True)
    feedback_sent = Column(Boolean, nullable=False, default=False)
    submitted_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )
