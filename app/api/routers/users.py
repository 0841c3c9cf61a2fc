from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_user_service
from app.models import User
from app.schemas.common import ErrorResponse, OkResponse
from app.schemas.user import RoleUpdateRequest, UserOut
from app.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut], summary="List users by name")
async def list_users(
    _: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return await users.list()


@router.put(
    "/{user_id}/role",
    response_model=UserOut,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Change a user's role (admin)",
)
async def change_role(
    user_id: int,
    payload: RoleUpdateRequest,
    actor: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return await users.change_role(actor, user_id, payload.role)


@router.delete(
    "/{user_id}",
    response_model=OkResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Delete a user (admin)",
)
async def delete_user(
    user_id: int,
    actor: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    await users.delete(actor, user_id)
    return {"ok": True}
