from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# participants_count > 0 is enforced by WorkshopSummaryService (400)
class WorkshopSummaryIn(BaseModel):
    participants_count: int
    actual_exercises: list[str] = Field(default_factory=list)
    instructor_insight: str | None = None
    day_insight: str | None = None
    safety_incident: bool = False
    safety_details: str | None = None
    issues_or_exceptions: str | None = None
    feedback_sent: bool = False


class WorkshopSummaryOut(BaseModel):
    id: int
    workshop_id: int
    participants_count: int
    actual_exercises: list[str] = Field(default_factory=list)
    instructor_insight: str | None = None
    day_insight: str | None = None
    safety_incident: bool
    safety_details: str | None = None
    issues_or_exceptions: str | None = None
    feedback_sent: bool
    submitted_by_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
