from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_current_user, get_summary_service, get_workshop_service
from app.models import User
from app.schemas.common import ErrorResponse, OkResponse
from app.schemas.equipment import EquipmentOut
from app.schemas.summary import WorkshopSummaryIn, WorkshopSummaryOut
from app.schemas.workshop import WorkshopCreate, WorkshopOut, WorkshopUpdate
from app.services.summaries import WorkshopSummaryService
from app.services.workshops import WorkshopService

router = APIRouter(prefix="/workshops", tags=["workshops"])


@router.get("", response_model=list[WorkshopOut], summary="List workshops, newest first")
async def list_workshops(
    _: User = Depends(get_current_user),
    svc: WorkshopService = Depends(get_workshop_service),
):
    return await svc.list()


@router.post(
    "",
    response_model=WorkshopOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Book a workshop",
    description="Creates the workshop and one ORDERED equipment item per manifest line.",
)
async def create_workshop(
    payload: WorkshopCreate,
    actor: User = Depends(get_current_user),
    svc: WorkshopService = Depends(get_workshop_service),
):
    return await svc.create(payload, actor)


@router.get("/{workshop_id}", response_model=WorkshopOut, responses={404: {"model": ErrorResponse}})
async def get_workshop(
    workshop_id: int,
    _: User = Depends(get_current_user),
    svc: WorkshopService = Depends(get_workshop_service),
):
    return await svc.get(workshop_id)


@router.put("/{workshop_id}", response_model=WorkshopOut, responses={404: {"model": ErrorResponse}})
async def update_workshop(
    workshop_id: int,
    payload: WorkshopUpdate,
    actor: User = Depends(get_current_user),
    svc: WorkshopService = Depends(get_workshop_service),
):
    return await svc.update(workshop_id, payload, actor)


@router.delete(
    "/{workshop_id}",
    response_model=OkResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a workshop with its summary, equipment and audit trail",
)
async def delete_workshop(
    workshop_id: int,
    _: User = Depends(get_current_user),
    svc: WorkshopService = Depends(get_workshop_service),
):
    await svc.delete(workshop_id)
    return {"ok": True}


@router.get(
    "/{workshop_id}/equipment",
    response_model=list[EquipmentOut],
    responses={404: {"model": ErrorResponse}},
)
async def list_workshop_equipment(
    workshop_id: int,
    _: User = Depends(get_current_user),
    svc: WorkshopService = Depends(get_workshop_service),
):
    return await svc.list_equipment(workshop_id)


@router.get(
    "/{workshop_id}/summary",
    response_model=WorkshopSummaryOut | None,
    responses={404: {"model": ErrorResponse}},
    summary="Workshop summary, or null when none was filed",
)
async def get_workshop_summary(
    workshop_id: int,
    _: User = Depends(get_current_user),
    svc: WorkshopSummaryService = Depends(get_summary_service),
):
    return await svc.get(workshop_id)


@router.post(
    "/{workshop_id}/summary",
    response_model=WorkshopSummaryOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="File or replace the workshop summary",
    description="201 on the first summary, 200 when an existing one is replaced.",
)
async def save_workshop_summary(
    workshop_id: int,
    payload: WorkshopSummaryIn,
    response: Response,
    actor: User = Depends(get_current_user),
    svc: WorkshopSummaryService = Depends(get_summary_service),
):
    summary, created = await svc.save(workshop_id, payload, actor)
    if not created:
        response.status_code = status.HTTP_200_OK
    return summary
