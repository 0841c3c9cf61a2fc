# app/schemas/equipment.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from app.models import EquipmentStatus


class EquipmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    workshop_id: int | None = None
    status: EquipmentStatus = EquipmentStatus.ORDERED
    assigned_to: str | None = None
    notes: str | None = None


class EquipmentOut(BaseModel):
    id: int
    name: str
    workshop_id: int | None = None
    status: EquipmentStatus
    assigned_to: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class EquipmentListItem(EquipmentOut):
    workshop_title: str | None = None
    workshop_date: datetime | None = None
    workshop_location: str | None = None


# Status arrives as a plain string so unknown values surface as a 400 from the
# workflow rather than a 422 from request parsing.
class StatusUpdateRequest(BaseModel):
    status: str
    notes: str | None = None


class AdvanceRequest(BaseModel):
    notes: str | None = None


EquipmentId = Annotated[int, Field(ge=1, le=2**63 - 1)]


class BatchStatusRequest(BaseModel):
    ids: list[EquipmentId]
    status: str


class BatchAdvanceRequest(BaseModel):
    ids: list[EquipmentId]
    notes: str | None = None


class StatusEventOut(BaseModel):
    id: int
    equipment_id: int
    from_status: EquipmentStatus | None = None
    to_status: EquipmentStatus
    changed_by_id: int | None = None
    notes: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class StatusChangeOut(BaseModel):
    item: EquipmentOut
    event: StatusEventOut

    model_config = {"from_attributes": True}


class BatchItemOut(BaseModel):
    id: int
    ok: bool
    item: EquipmentOut | None = None
    error: str | None = None

    model_config = {"from_attributes": True}


class BatchResultOut(BaseModel):
    items: list[BatchItemOut]
    success_count: int
    failure_count: int

    model_config = {"from_attributes": True}
