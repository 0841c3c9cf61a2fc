from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.models import ContactRole


class ClientContactCreate(BaseModel):
    client_name: str = Field(min_length=1, max_length=255)
    contact_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=64)
    role: ContactRole
    is_active: bool = True


class ClientContactUpdate(BaseModel):
    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=64)
    role: ContactRole | None = None
    is_active: bool | None = None


class ClientContactOut(BaseModel):
    id: int
    client_name: str
    contact_name: str
    email: str
    phone: str | None = None
    role: ContactRole
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
