from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_contact_service, get_current_user
from app.schemas.common import ErrorResponse
from app.schemas.contact import ClientContactCreate, ClientContactOut, ClientContactUpdate
from app.services.contacts import ContactService

router = APIRouter(
    prefix="/client-contacts", tags=["client-contacts"], dependencies=[Depends(get_current_user)]
)


@router.get("", response_model=list[ClientContactOut], summary="Client contacts by client name")
async def list_contacts(
    client_name: str | None = Query(None, alias="clientName"),
    active_only: bool = Query(False, alias="activeOnly"),
    svc: ContactService = Depends(get_contact_service),
):
    return await svc.list(client_name=client_name, active_only=active_only)


@router.post(
    "",
    response_model=ClientContactOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a client contact",
)
async def create_contact(
    payload: ClientContactCreate, svc: ContactService = Depends(get_contact_service)
):
    return await svc.create(payload)


@router.get("/{contact_id}", response_model=ClientContactOut, responses={404: {"model": ErrorResponse}})
async def get_contact(contact_id: int, svc: ContactService = Depends(get_contact_service)):
    return await svc.get(contact_id)


@router.put(
    "/{contact_id}",
    response_model=ClientContactOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update a contact; set is_active to false to retire it",
)
async def update_contact(
    contact_id: int,
    payload: ClientContactUpdate,
    svc: ContactService = Depends(get_contact_service),
):
    return await svc.update(contact_id, payload)
