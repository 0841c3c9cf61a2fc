from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.models import WorkshopStatus


class ExerciseSelection(BaseModel):
    exercise_id: int
    sub_activity_ids: list[int] = Field(default_factory=list)
    num_groups: int = Field(default=1, description="Values below 1 count as one group")
    notes: str | None = None


class _WorkshopFields(BaseModel):
    process_id: int | None = None
    date: datetime | None = None
    location: str | None = Field(default=None, max_length=255)
    participants: int | None = Field(default=None, ge=0)
    client_name: str | None = Field(default=None, max_length=255)
    hr_contact_name: str | None = None
    hr_contact_phone: str | None = None
    hr_contact_email: str | None = None
    procurement_contact_name: str | None = None
    procurement_contact_phone: str | None = None
    procurement_contact_email: str | None = None
    notes: str | None = None
    instructor_id: int | None = None


class WorkshopCreate(_WorkshopFields):
    title: str | None = Field(default=None, max_length=255)
    status: WorkshopStatus = WorkshopStatus.planned
    checklist: dict[str, str] = Field(default_factory=dict)
    exercises: list[ExerciseSelection] = Field(default_factory=list)


class WorkshopUpdate(_WorkshopFields):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    status: WorkshopStatus | None = None
    checklist: dict[str, str] | None = None


class WorkshopOut(BaseModel):
    id: int
    process_id: int | None = None
    title: str
    date: datetime | None = None
    location: str | None = None
    participants: int | None = None
    status: WorkshopStatus
    client_name: str | None = None
    hr_contact_name: str | None = None
    hr_contact_phone: str | None = None
    hr_contact_email: str | None = None
    procurement_contact_name: str | None = None
    procurement_contact_phone: str | None = None
    procurement_contact_email: str | None = None
    checklist: dict[str, str] = Field(default_factory=dict)
    exercises: list[dict[str, Any]] = Field(default_factory=list)
    notes: str | None = None
    instructor_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
