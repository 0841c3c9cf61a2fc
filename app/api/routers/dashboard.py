from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_dashboard_service
from app.schemas.dashboard import DashboardOut
from app.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=DashboardOut, summary="Headline counts")
async def dashboard(svc: DashboardService = Depends(get_dashboard_service)):
    return await svc.summary()
