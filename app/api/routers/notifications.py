from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_preference_service
from app.models import User
from app.schemas.common import ErrorResponse
from app.schemas.notification import NotificationPreferencesOut, NotificationPreferencesUpdate
from app.services.preferences import PreferenceService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/preferences", response_model=NotificationPreferencesOut)
async def get_own_preferences(
    actor: User = Depends(get_current_user),
    svc: PreferenceService = Depends(get_preference_service),
):
    return await svc.get(actor)


@router.patch("/preferences", response_model=NotificationPreferencesOut)
async def update_own_preferences(
    payload: NotificationPreferencesUpdate,
    actor: User = Depends(get_current_user),
    svc: PreferenceService = Depends(get_preference_service),
):
    return await svc.update(actor, payload.model_dump(exclude_unset=True))


@router.get(
    "/preferences/{user_id}",
    response_model=NotificationPreferencesOut,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Another user's preferences (admin)",
)
async def get_user_preferences(
    user_id: int,
    actor: User = Depends(get_current_user),
    svc: PreferenceService = Depends(get_preference_service),
):
    return await svc.get(actor, user_id)


@router.patch(
    "/preferences/{user_id}",
    response_model=NotificationPreferencesOut,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_user_preferences(
    user_id: int,
    payload: NotificationPreferencesUpdate,
    actor: User = Depends(get_current_user),
    svc: PreferenceService = Depends(get_preference_service),
):
    return await svc.update(actor, payload.model_dump(exclude_unset=True), user_id)
