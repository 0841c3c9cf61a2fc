from __future__ import annotations

from pydantic import BaseModel, Field


class EquipmentRequirementOut(BaseModel):
    item: str
    quantity: int
    scalable: bool

    model_config = {"from_attributes": True}


class SubActivityOut(BaseModel):
    id: int
    name: str
    equipment: list[EquipmentRequirementOut]

    model_config = {"from_attributes": True}


class ExerciseOut(BaseModel):
    id: int
    name: str
    is_composite: bool
    equipment: list[EquipmentRequirementOut] = Field(default_factory=list)
    sub_activities: list[SubActivityOut] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)
    notes: str | None = None

    model_config = {"from_attributes": True}


class ManifestRequest(BaseModel):
    sub_activity_ids: list[int] = Field(default_factory=list)
    num_groups: int = 1


class EquipmentTotalOut(BaseModel):
    item: str
    total: int
    display_name: str

    model_config = {"from_attributes": True}


class ManifestOut(BaseModel):
    exercise_id: int
    num_groups: int
    items: list[EquipmentTotalOut]
