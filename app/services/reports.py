from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from app.infra.unit_of_work import UnitOfWork
from app.models import MonthlyReport, User, UserRole, WorkshopStatus
from app.repositories.workshop_repository import WorkshopDetailRow
from app.schemas.report import MonthlyReportCreate
from app.services.events import EventBus, MonthlyReportDue, ReportApproved
from app.services.users import require_admin

logger = logging.getLogger(__name__)

CSV_HEADERS = ("Instructor", "Date", "Client", "Location", "Status", "Participants")

WORKSHOP_STATUS_LABELS: dict[WorkshopStatus, str] = {
    WorkshopStatus.planned: "Planned",
    WorkshopStatus.confirmed: "Confirmed",
    WorkshopStatus.completed: "Completed",
    WorkshopStatus.cancelled: "Cancelled",
}

BOM = "\ufeff"


def period_bounds(
    month: int | None, year: int | None
) -> tuple[datetime | None, datetime | None]:
    """Return ``[start, end)`` for a month of a year, or a whole year.

    A month without a year applies no date filter.
    """

    if year is None:
        return None, None
    if month is None:
        return datetime(year, 1, 1, tzinfo=UTC), datetime(year + 1, 1, 1, tzinfo=UTC)
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    start = datetime(year, month, 1, tzinfo=UTC)
    end = datetime(year + 1, 1, 1, tzinfo=UTC) if month == 12 else datetime(year, month + 1, 1, tzinfo=UTC)
    return start, end


def export_filename(month: int | None, year: int | None) -> str:
    return f"monthly-report-{year or 'all'}-{month or 'all'}.csv"


def render_csv(rows: Sequence[WorkshopDetailRow]) -> str:
    buf = io.StringIO()
    buf.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for r in rows:
        writer.writerow(
            [
                r.instructor_name or "",
                r.date.strftime("%d/%m/%Y") if r.date else "",
                r.client_name or "",
                r.location or "",
                WORKSHOP_STATUS_LABELS.get(WorkshopStatus(r.status), str(r.status)),
                str(r.participants) if r.participants else "",
            ]
        )
    return BOM + buf.getvalue()


class ReportService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork], events: EventBus | None = None):
        self._uow_factory = uow_factory
        self._events = events

    async def monthly_rows(
        self,
        *,
        month: int | None = None,
        year: int | None = None,
        instructor_id: int | None = None,
    ) -> list[WorkshopDetailRow]:
        start, end = period_bounds(month, year)
        try:
            async with self._uow_factory() as uow:
                return await uow.workshops.list_with_details(
                    start=start, end=end, instructor_id=instructor_id
                )
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def export_csv(
        self,
        *,
        month: int | None = None,
        year: int | None = None,
        instructor_id: int | None = None,
    ) -> tuple[str, str]:
        """Return ``(filename, csv_text)`` for the monthly activity export."""

        rows = await self.monthly_rows(month=month, year=year, instructor_id=instructor_id)
        logger.info("monthly report exported", extra={"rows": len(rows), "month": month, "year": year})
        return export_filename(month, year), render_csv(rows)

    async def list_records(self, actor: User) -> list[MonthlyReport]:
        # Instructors only see their own submissions
        only = actor.id if actor.role == UserRole.instructor else None
        try:
            async with self._uow_factory() as uow:
                return await uow.reports.list(instructor_id=only)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

    async def create_record(self, actor: User, payload: MonthlyReportCreate) -> MonthlyReport:
        instructor_id = payload.instructor_id or actor.id
        if instructor_id != actor.id and not actor.is_admin:
            raise ForbiddenError("only admins can file reports for other instructors")
        start, end = period_bounds(payload.month, payload.year)
        try:
            async with self._uow_factory() as uow:
                if await uow.users.get(instructor_id) is None:
                    raise NotFoundError(f"user {instructor_id} not found")
                existing = await uow.reports.find(
                    instructor_id=instructor_id, month=payload.month, year=payload.year
                )
                if existing is not None:
                    raise ConflictError("a report for this month already exists")
                rows = await uow.workshops.list_with_details(
                    start=start, end=end, instructor_id=instructor_id
                )
                report = await uow.reports.create(
                    instructor_id=instructor_id,
                    month=payload.month,
                    year=payload.year,
                    workshops_count=len(rows),
                )
        except IntegrityError as exc:
            raise ConflictError("a report for this month already exists") from exc
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc
        logger.info(
            "monthly report filed",
            extra={"report_id": report.id, "instructor_id": instructor_id, "workshops": len(rows)},
        )
        return report

    async def approve(self, actor: User, report_id: int) -> MonthlyReport:
        require_admin(actor)
        try:
            async with self._uow_factory() as uow:
                report = await uow.reports.get(report_id)
                if report is None:
                    raise NotFoundError(f"report {report_id} not found")
                report = await uow.reports.approve(report, approved_by_id=actor.id)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        logger.info("monthly report approved", extra={"report_id": report_id, "actor_id": actor.id})
        if self._events is not None:
            try:
                self._events.publish(ReportApproved(report_id=report.id, approved_by_id=actor.id))
            except Exception:
                logger.exception("failed to dispatch report approval notification")
        return report

    async def send_due_reminders(self, actor: User, *, month: int, year: int) -> list[int]:
        """Remind every instructor who has not filed a report for the period.

        Returns the ids of the instructors a reminder was published for.
        """

        require_admin(actor)
        period_bounds(month, year)
        try:
            async with self._uow_factory() as uow:
                instructors = await uow.users.list_by_roles({UserRole.instructor})
                filed = await uow.reports.filed_instructor_ids(month=month, year=year)
        except SQLAlchemyError as exc:
            raise InfrastructureError("database unavailable") from exc

        pending = [int(u.id) for u in instructors if int(u.id) not in filed]
        logger.info(
            "monthly report reminders",
            extra={"month": month, "year": year, "instructor_ids": pending},
        )
        if self._events is not None:
            for instructor_id in pending:
                try:
                    self._events.publish(
                        MonthlyReportDue(instructor_id=instructor_id, month=month, year=year)
                    )
                except Exception:
                    logger.exception("failed to dispatch monthly report reminder")
        return pending
