from __future__ import annotations

from pydantic import BaseModel, Field


class DashboardOut(BaseModel):
    total_processes: int
    active_processes: int
    total_workshops: int
    total_equipment: int
    equipment_by_status: dict[str, int] = Field(
        description="Counts keyed by ORDERED, READY, PICKED_UP and RETURNED"
    )
    total_instructors: int
