from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.models import WorkshopStatus


class MonthlyActivityRow(BaseModel):
    id: int
    title: str
    date: datetime | None = None
    location: str | None = None
    participants: int | None = None
    status: WorkshopStatus
    client_name: str | None = None
    instructor_id: int | None = None
    instructor_name: str | None = None

    model_config = {"from_attributes": True}


class MonthlyReportCreate(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    instructor_id: int | None = Field(
        default=None, description="Defaults to the acting user"
    )


class MonthlyReportOut(BaseModel):
    id: int
    instructor_id: int
    month: int
    year: int
    workshops_count: int
    approved: bool
    approved_by_id: int | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ReportReminderRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)


class ReportReminderOut(BaseModel):
    month: int
    year: int
    instructor_ids: list[int] = Field(description="Instructors with no report filed for the period")
