from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.models import UserRole


class LoginRequest(BaseModel):
    email: EmailStr = Field(description="Work email address")


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class RoleUpdateRequest(BaseModel):
    role: UserRole
