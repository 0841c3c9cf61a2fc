from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user, get_process_service, get_workshop_service
from app.schemas.common import ErrorResponse, OkResponse
from app.schemas.process import ProcessCreate, ProcessOut, ProcessUpdate
from app.schemas.workshop import WorkshopOut
from app.services.processes import ProcessService
from app.services.workshops import WorkshopService

router = APIRouter(prefix="/processes", tags=["processes"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[ProcessOut], summary="List processes")
async def list_processes(svc: ProcessService = Depends(get_process_service)):
    return await svc.list()


@router.post(
    "",
    response_model=ProcessOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create a process",
)
async def create_process(payload: ProcessCreate, svc: ProcessService = Depends(get_process_service)):
    return await svc.create(payload)


@router.get("/{process_id}", response_model=ProcessOut, responses={404: {"model": ErrorResponse}})
async def get_process(process_id: int, svc: ProcessService = Depends(get_process_service)):
    return await svc.get(process_id)


@router.put("/{process_id}", response_model=ProcessOut, responses={404: {"model": ErrorResponse}})
async def update_process(
    process_id: int,
    payload: ProcessUpdate,
    svc: ProcessService = Depends(get_process_service),
):
    return await svc.update(process_id, payload)


@router.delete(
    "/{process_id}",
    response_model=OkResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Delete a process without workshops",
)
async def delete_process(process_id: int, svc: ProcessService = Depends(get_process_service)):
    await svc.delete(process_id)
    return {"ok": True}


@router.get(
    "/{process_id}/workshops",
    response_model=list[WorkshopOut],
    responses={404: {"model": ErrorResponse}},
)
async def list_process_workshops(
    process_id: int, svc: WorkshopService = Depends(get_workshop_service)
):
    return await svc.list(process_id=process_id)
