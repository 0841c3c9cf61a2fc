from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.models import ProcessStatus, ProcessType


class ProcessCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: ProcessType
    status: ProcessStatus = ProcessStatus.active
    client_name: str = Field(min_length=1, max_length=255)
    instructor_id: int | None = None
    description: str | None = None


class ProcessUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: ProcessType | None = None
    status: ProcessStatus | None = None
    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    instructor_id: int | None = None
    description: str | None = None


class ProcessOut(BaseModel):
    id: int
    name: str
    type: ProcessType
    status: ProcessStatus
    client_name: str
    instructor_id: int | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
