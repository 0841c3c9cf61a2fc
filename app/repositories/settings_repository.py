from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import AppSetting


class AppSettingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> AppSetting | None:
        return await self._session.get(AppSetting, key)

    async def set(self, key: str, value: str | None) -> AppSetting:
        setting = await self.get(key)
        if setting is None:
            setting = AppSetting(key=key, value=value)
            self._session.add(setting)
        else:
            setting.value = value
        await self._session.flush()
        return setting
