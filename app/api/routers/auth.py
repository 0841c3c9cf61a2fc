from fastapi import APIRouter, Depends, Request

from app.api.deps import get_current_user, get_user_service
from app.middleware.rate_limit import LOGIN_LIMIT, limiter
from app.models import User
from app.schemas.common import ErrorResponse
from app.schemas.user import LoginRequest, UserOut
from app.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=UserOut,
    responses={429: {"description": "Too many login attempts"}},
    summary="Log in by email",
    description="Finds the user by email or creates an instructor account on first login.",
)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    return await users.login(str(payload.email))


@router.get(
    "/me",
    response_model=UserOut,
    responses={401: {"model": ErrorResponse}},
    summary="Acting user",
)
async def me(user: User = Depends(get_current_user)):
    return user
