from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_equipment_service, get_workflow_service
from app.models import User
from app.repositories.interfaces import EquipmentListRow
from app.schemas.common import ErrorResponse
from app.schemas.equipment import (
    AdvanceRequest,
    BatchAdvanceRequest,
    BatchResultOut,
    BatchStatusRequest,
    EquipmentCreate,
    EquipmentListItem,
    EquipmentOut,
    StatusChangeOut,
    StatusEventOut,
    StatusUpdateRequest,
)
from app.services.equipment_workflow import EquipmentWorkflowService
from app.services.equipments import EquipmentService

router = APIRouter(prefix="/equipment", tags=["equipment"])


def _list_item(row: EquipmentListRow) -> EquipmentListItem:
    return EquipmentListItem(
        **EquipmentOut.model_validate(row.item).model_dump(),
        workshop_title=row.workshop_title,
        workshop_date=row.workshop_date,
        workshop_location=row.workshop_location,
    )


@router.get(
    "",
    response_model=list[EquipmentListItem],
    responses={400: {"model": ErrorResponse}},
    summary="List equipment with its workshop",
)
async def list_equipment(
    status_filter: str | None = Query(None, alias="status", description="ORDERED, READY, ..."),
    _: User = Depends(get_current_user),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return [_list_item(row) for row in await svc.list(status_filter)]


@router.post(
    "",
    response_model=EquipmentOut,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_equipment(
    payload: EquipmentCreate,
    _: User = Depends(get_current_user),
    svc: EquipmentService = Depends(get_equipment_service),
):
    return await svc.create(payload)


@router.put(
    "/batch-status",
    response_model=BatchResultOut,
    responses={400: {"model": ErrorResponse}},
    summary="Set one status on many items",
    description="Each id is updated in its own transaction; failures are reported per id.",
)
async def batch_set_status(
    payload: BatchStatusRequest,
    actor: User = Depends(get_current_user),
    svc: EquipmentWorkflowService = Depends(get_workflow_service),
):
    return await svc.batch_set_status(payload.ids, payload.status, actor.id)


@router.post(
    "/batch-advance",
    response_model=BatchResultOut,
    responses={400: {"model": ErrorResponse}},
    summary="Advance many items one step",
)
async def batch_advance(
    payload: BatchAdvanceRequest,
    actor: User = Depends(get_current_user),
    svc: EquipmentWorkflowService = Depends(get_workflow_service),
):
    return await svc.batch_advance(payload.ids, actor.id, payload.notes)


@router.put(
    "/{item_id}/status",
    response_model=StatusChangeOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Set an explicit status",
)
async def set_status(
    item_id: int,
    payload: StatusUpdateRequest,
    actor: User = Depends(get_current_user),
    svc: EquipmentWorkflowService = Depends(get_workflow_service),
):
    return await svc.set_status(item_id, payload.status, actor.id, payload.notes)


@router.post(
    "/{item_id}/advance",
    response_model=StatusChangeOut,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Advance to the next status",
)
async def advance_status(
    item_id: int,
    payload: AdvanceRequest | None = None,
    actor: User = Depends(get_current_user),
    svc: EquipmentWorkflowService = Depends(get_workflow_service),
):
    notes = payload.notes if payload else None
    return await svc.advance_status(item_id, actor.id, notes)


@router.get(
    "/{item_id}/events",
    response_model=list[StatusEventOut],
    responses={404: {"model": ErrorResponse}},
    summary="Status audit trail, newest first",
)
async def list_events(
    item_id: int,
    _: User = Depends(get_current_user),
    svc: EquipmentWorkflowService = Depends(get_workflow_service),
):
    return await svc.list_events(item_id)
