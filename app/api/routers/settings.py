from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from app.api.deps import get_current_user, get_setting_service
from app.models import User
from app.schemas.common import ErrorResponse
from app.schemas.setting import SettingOut, SettingValue
from app.services.app_settings import AppSettingService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/{key}", response_model=SettingOut, summary="Read a setting (null when unset)")
async def get_setting(
    key: str = Path(min_length=1, max_length=100),
    _: User = Depends(get_current_user),
    svc: AppSettingService = Depends(get_setting_service),
):
    return await svc.get(key)


@router.put(
    "/{key}",
    response_model=SettingOut,
    responses={403: {"model": ErrorResponse}},
    summary="Write a setting (admin)",
)
async def put_setting(
    payload: SettingValue,
    key: str = Path(min_length=1, max_length=100),
    actor: User = Depends(get_current_user),
    svc: AppSettingService = Depends(get_setting_service),
):
    return await svc.set(actor, key, payload.value)
