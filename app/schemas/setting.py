from __future__ import annotations

from pydantic import BaseModel


class SettingValue(BaseModel):
    value: str | None = None


class SettingOut(BaseModel):
    key: str
    value: str | None = None
