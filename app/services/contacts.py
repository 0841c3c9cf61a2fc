from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError, NotFoundError, ValidationError
from app.infra.unit_of_work import UnitOfWork
from app.models import ClientContact
from app.schemas.contact import ClientContactCreate, ClientContactUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("client_name", "contact_name", "email", "role", "is_active")


class ContactService:
    """Client-side HR and procurement contacts, ordered by client name."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    async def list(
        self, *, client_name: str | None = None, active_only: bool = False
    ) -> list[ClientContact]:
        try:
            async with self._uow_factory() as uow:
                return await uow.contacts.list(client_name=client_name, active_only=active_only)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def get(self, contact_id: int) -> ClientContact:
        try:
            async with self._uow_factory() as uow:
                contact = await uow.contacts.get(contact_id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        if contact is None:
            raise NotFoundError(f"contact {contact_id} not found")
        return contact

    async def create(self, payload: ClientContactCreate) -> ClientContact:
        fields = payload.model_dump()
        fields["email"] = str(payload.email)
        try:
            async with self._uow_factory() as uow:
                contact = await uow.contacts.create(**fields)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info("client contact created", extra={"contact_id": contact.id})
        return contact

    async def update(self, contact_id: int, payload: ClientContactUpdate) -> ClientContact:
        changes = payload.model_dump(exclude_unset=True)
        for key in REQUIRED_FIELDS:
            if key in changes and changes[key] is None:
                raise ValidationError(f"{key} cannot be null")
        if "email" in changes:
            changes["email"] = str(changes["email"])
        try:
            async with self._uow_factory() as uow:
                contact = await uow.contacts.get(contact_id)
                if contact is None:
                    raise NotFoundError(f"contact {contact_id} not found")
                contact = await uow.contacts.update(contact, changes)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        return contact
