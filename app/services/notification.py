"""Email notifications for workshop, equipment, process and report events.

Handlers subscribe to the application's ``EventBus``. Recipient selection
honours each user's ``NotificationPreference`` (no row means everything on).
When ``SMTP_HOST`` is not configured messages are logged instead of sent.
"""

from __future__ import annotations

import asyncio
import html
import logging
import smtplib
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core.config import Settings, get_settings
from app.infra.unit_of_work import UnitOfWork
from app.models import (
    EquipmentStatus,
    MonthlyReport,
    NotificationPreference,
    Process,
    User,
    UserRole,
    Workshop,
)
from app.services.events import (
    EquipmentStatusChanged,
    EventBus,
    MonthlyReportDue,
    ProcessAssigned,
    ReportApproved,
    WorkshopCancelled,
    WorkshopCreated,
    WorkshopUpdated,
)

logger = logging.getLogger(__name__)

STATUS_LABELS: dict[EquipmentStatus, str] = {
    EquipmentStatus.ORDERED: "Ordered",
    EquipmentStatus.READY: "Ready for pickup",
    EquipmentStatus.PICKED_UP: "Picked up",
    EquipmentStatus.RETURNED: "Returned",
}

_BADGE_COLORS: dict[EquipmentStatus, tuple[str, str]] = {
    EquipmentStatus.ORDERED: ("#fffde7", "#f57f17"),
    EquipmentStatus.READY: ("#e8f5e9", "#2e7d32"),
    EquipmentStatus.PICKED_UP: ("#e3f2fd", "#1565c0"),
    EquipmentStatus.RETURNED: ("#ffebee", "#c62828"),
}

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8" /></head>
<body style="font-family: Arial, sans-serif; background: #f5f5f5; margin: 0; padding: 0;">
  <div style="max-width: 600px; margin: 32px auto; background: #fff; border-radius: 8px;">
    <div style="background: #4A90C2; color: #fff; padding: 24px 32px;">
      <h1 style="margin: 0; font-size: 22px;">Workshop Ops - {title}</h1>
    </div>
    <div style="padding: 24px 32px; color: #333; line-height: 1.6;">{body}</div>
    <div style="background: #f0f0f0; padding: 16px 32px; font-size: 12px; color: #888;">
      Automated message from the workshop operations system
    </div>
  </div>
</body>
</html>"""


@dataclass(frozen=True)
class EmailMessage:
    to: tuple[str, ...]
    subject: str
    html: str


def status_label(status: EquipmentStatus | None) -> str:
    if status is None:
        return "-"
    return STATUS_LABELS.get(status, status.value)


def month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return str(month)


def _e(value: object) -> str:
    return html.escape(str(value))


def _badge(status: EquipmentStatus | None) -> str:
    if status is None:
        return "-"
    bg, fg = _BADGE_COLORS[status]
    return (
        f'<span style="background: {bg}; color: {fg}; padding: 4px 12px; '
        f'border-radius: 12px; font-weight: bold;">{_e(status_label(status))}</span>'
    )


def render(title: str, body: str) -> str:
    return _BASE_TEMPLATE.format(title=_e(title), body=body)


def _workshop_lines(workshop: Workshop, process: Process | None) -> str:
    lines = [f"<li><strong>Title:</strong> {_e(workshop.title)}</li>"]
    if process is not None:
        lines.append(
            f"<li><strong>Process:</strong> {_e(process.name)} ({_e(process.client_name)})</li>"
        )
    if workshop.date:
        lines.append(f"<li><strong>Date:</strong> {workshop.date:%d/%m/%Y}</li>")
    if workshop.location:
        lines.append(f"<li><strong>Location:</strong> {_e(workshop.location)}</li>")
    return "<ul>" + "".join(lines) + "</ul>"


# --- Recipient selection ---


def wants(prefs: Mapping[int, NotificationPreference], user: User, flag: str) -> bool:
    pref = prefs.get(int(user.id))
    if pref is None:
        return True
    return bool(getattr(pref, flag))


def select_recipients(
    users: Iterable[User],
    prefs: Mapping[int, NotificationPreference],
    *,
    flag: str,
    roles: set[UserRole] | None = None,
) -> list[User]:
    return [
        u
        for u in users
        if (roles is None or u.role in roles) and wants(prefs, u, flag)
    ]


def select_equipment_recipients(
    users: Iterable[User],
    prefs: Mapping[int, NotificationPreference],
    to_status: EquipmentStatus,
) -> list[User]:
    """READY goes to instructors and admins who want pickup alerts; any other
    status goes to everyone subscribed to equipment status changes."""

    if to_status == EquipmentStatus.READY:
        return select_recipients(
            users,
            prefs,
            flag="on_equipment_ready",
            roles={UserRole.instructor, UserRole.admin},
        )
    return select_recipients(users, prefs, flag="on_equipment_status_changed")


# --- Delivery ---


class EmailSender:
    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    @property
    def configured(self) -> bool:
        return bool(self._settings.smtp_host)

    async def send(self, message: EmailMessage) -> None:
        if not message.to:
            return
        if not self.configured:
            logger.info(
                "SMTP_HOST is not set. Email logged only.",
                extra={"to": list(message.to), "subject": message.subject},
            )
            return
        await asyncio.to_thread(self._send_sync, message)
        logger.info("email sent", extra={"to": list(message.to), "subject": message.subject})

    def _send_sync(self, message: EmailMessage) -> None:
        s = self._settings
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = s.mail_sender
        mime["To"] = ", ".join(message.to)
        mime.attach(MIMEText(message.html, "html", "utf-8"))

        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=30) as server:
            if s.smtp_use_tls:
                server.starttls()
            if s.smtp_username and s.smtp_password:
                server.login(s.smtp_username, s.smtp_password)
            server.sendmail(s.mail_sender, list(message.to), mime.as_string())


class EmailNotifier:
    """Turns domain events into emails."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        sender: EmailSender | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._sender = sender or EmailSender()

    def register(self, bus: EventBus) -> None:
        bus.subscribe(EquipmentStatusChanged, self.on_equipment_status_changed)
        bus.subscribe(WorkshopCreated, self.on_workshop_created)
        bus.subscribe(WorkshopUpdated, self.on_workshop_updated)
        bus.subscribe(WorkshopCancelled, self.on_workshop_cancelled)
        bus.subscribe(ProcessAssigned, self.on_process_assigned)
        bus.subscribe(ReportApproved, self.on_report_approved)
        bus.subscribe(MonthlyReportDue, self.on_monthly_report_due)

    async def notify_equipment_status_changed(
        self,
        recipients: Sequence[User],
        item_name: str,
        from_status: EquipmentStatus | None,
        to_status: EquipmentStatus,
        actor: User | None,
    ) -> None:
        if not recipients:
            return
        body = (
            "<p>Equipment status changed:</p><ul>"
            f"<li><strong>Item:</strong> {_e(item_name)}</li>"
            f"<li><strong>From:</strong> {_badge(from_status)}</li>"
            f"<li><strong>To:</strong> {_badge(to_status)}</li>"
            f"<li><strong>Updated by:</strong> {_e(actor.name if actor else '-')}</li>"
            "</ul>"
        )
        await self._sender.send(
            EmailMessage(
                to=tuple(u.email for u in recipients),
                subject=f"Equipment update: {item_name} - {status_label(to_status)}",
                html=render("Equipment status update", body),
            )
        )

    async def on_equipment_status_changed(self, event: EquipmentStatusChanged) -> None:
        async with self._uow_factory() as uow:
            users = await uow.users.list()
            prefs = await uow.preferences.get_many(u.id for u in users)
            actor = await uow.users.get(event.actor_id)
        recipients = select_equipment_recipients(users, prefs, event.to_status)
        await self.notify_equipment_status_changed(
            recipients, event.equipment_name, event.from_status, event.to_status, actor
        )

    async def _workshop_mail(
        self,
        workshop_id: int,
        *,
        flag: str,
        roles: set[UserRole],
        title: str,
        intro: str,
        subject_prefix: str,
    ) -> None:
        async with self._uow_factory() as uow:
            workshop = await uow.workshops.get(workshop_id)
            if workshop is None:
                logger.warning("workshop vanished before notification", extra={"id": workshop_id})
                return
            process = (
                await uow.processes.get(workshop.process_id) if workshop.process_id else None
            )
            users = await uow.users.list_by_roles(roles)
            prefs = await uow.preferences.get_many(u.id for u in users)
        recipients = select_recipients(users, prefs, flag=flag, roles=roles)
        if not recipients:
            return
        body = f"<p>{intro}</p>" + _workshop_lines(workshop, process)
        await self._sender.send(
            EmailMessage(
                to=tuple(u.email for u in recipients),
                subject=f"{subject_prefix}: {workshop.title}",
                html=render(title, body),
            )
        )

    async def on_workshop_created(self, event: WorkshopCreated) -> None:
        await self._workshop_mail(
            event.workshop_id,
            flag="on_workshop_created",
            roles={UserRole.admin, UserRole.office},
            title="New workshop",
            intro="A new workshop was created:",
            subject_prefix="New workshop",
        )

    async def on_workshop_updated(self, event: WorkshopUpdated) -> None:
        await self._workshop_mail(
            event.workshop_id,
            flag="on_workshop_updated",
            roles={UserRole.admin, UserRole.office},
            title="Workshop update",
            intro="Workshop details were updated:",
            subject_prefix="Workshop updated",
        )

    async def on_workshop_cancelled(self, event: WorkshopCancelled) -> None:
        await self._workshop_mail(
            event.workshop_id,
            flag="on_workshop_cancelled",
            roles={UserRole.admin, UserRole.office, UserRole.instructor},
            title="Workshop cancelled",
            intro="A workshop was <strong>cancelled</strong>:",
            subject_prefix="Workshop cancelled",
        )

    async def on_process_assigned(self, event: ProcessAssigned) -> None:
        async with self._uow_factory() as uow:
            process = await uow.processes.get(event.process_id)
            instructor = await uow.users.get(event.instructor_id)
            prefs = await uow.preferences.get_many([event.instructor_id])
        if process is None or instructor is None:
            return
        if not wants(prefs, instructor, "on_process_assigned"):
            return
        body = (
            f"<p>Hello {_e(instructor.name)},</p>"
            "<p>A process was assigned to you:</p><ul>"
            f"<li><strong>Process:</strong> {_e(process.name)}</li>"
            f"<li><strong>Client:</strong> {_e(process.client_name)}</li>"
            f"<li><strong>Type:</strong> {_e(process.type.value)}</li>"
            "</ul>"
        )
        await self._sender.send(
            EmailMessage(
                to=(instructor.email,),
                subject=f"New process assigned to you: {process.name}",
                html=render("Process assignment", body),
            )
        )

    async def on_report_approved(self, event: ReportApproved) -> None:
        async with self._uow_factory() as uow:
            report: MonthlyReport | None = await uow.reports.get(event.report_id)
            if report is None:
                return
            instructor = await uow.users.get(report.instructor_id)
            approver = await uow.users.get(event.approved_by_id)
            prefs = await uow.preferences.get_many([report.instructor_id])
        if instructor is None or not wants(prefs, instructor, "on_report_approved"):
            return
        period = f"{month_name(report.month)} {report.year}"
        body = (
            f"<p>Hello {_e(instructor.name)},</p>"
            f"<p>Your monthly report for <strong>{_e(period)}</strong> was approved"
            f" by {_e(approver.name if approver else '-')}.</p>"
            f"<ul><li><strong>Workshops:</strong> {report.workshops_count}</li></ul>"
        )
        await self._sender.send(
            EmailMessage(
                to=(instructor.email,),
                subject=f"Monthly report approved - {period}",
                html=render("Monthly report approved", body),
            )
        )

    async def on_monthly_report_due(self, event: MonthlyReportDue) -> None:
        async with self._uow_factory() as uow:
            instructor = await uow.users.get(event.instructor_id)
            prefs = await uow.preferences.get_many([event.instructor_id])
        if instructor is None or not wants(prefs, instructor, "on_monthly_report_due"):
            return
        period = f"{month_name(event.month)} {event.year}"
        body = (
            f"<p>Hello {_e(instructor.name)},</p>"
            f"<p>Your <strong>monthly activity report</strong> for {_e(period)} is due.</p>"
            "<p>Please sign in and file it as soon as you can.</p>"
        )
        await self._sender.send(
            EmailMessage(
                to=(instructor.email,),
                subject=f"Reminder: monthly report due - {period}",
                html=render("Monthly report reminder", body),
            )
        )


__all__ = [
    "EmailMessage",
    "EmailNotifier",
    "EmailSender",
    "STATUS_LABELS",
    "month_name",
    "select_equipment_recipients",
    "select_recipients",
    "status_label",
]
