from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_current_user, get_report_service
from app.models import User
from app.schemas.common import ErrorResponse
from app.schemas.report import (
    MonthlyActivityRow,
    MonthlyReportCreate,
    MonthlyReportOut,
    ReportReminderOut,
    ReportReminderRequest,
)
from app.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get(
    "/monthly",
    response_model=list[MonthlyActivityRow],
    summary="Monthly activity",
    description="Workshops with instructor names. month applies only together with year.",
)
async def monthly_activity(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=2000, le=2100),
    instructor_id: int | None = Query(None, alias="instructorId"),
    _: User = Depends(get_current_user),
    svc: ReportService = Depends(get_report_service),
):
    return await svc.monthly_rows(month=month, year=year, instructor_id=instructor_id)


@router.get("/monthly-export", summary="Monthly activity as CSV")
async def monthly_export(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=2000, le=2100),
    instructor_id: int | None = Query(None, alias="instructorId"),
    _: User = Depends(get_current_user),
    svc: ReportService = Depends(get_report_service),
):
    filename, body = await svc.export_csv(month=month, year=year, instructor_id=instructor_id)
    return Response(
        content=body.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("", response_model=list[MonthlyReportOut], summary="Monthly report records")
async def list_reports(
    actor: User = Depends(get_current_user),
    svc: ReportService = Depends(get_report_service),
):
    return await svc.list_records(actor)


@router.post(
    "",
    response_model=MonthlyReportOut,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="File a monthly report",
)
async def create_report(
    payload: MonthlyReportCreate,
    actor: User = Depends(get_current_user),
    svc: ReportService = Depends(get_report_service),
):
    return await svc.create_record(actor, payload)


@router.post(
    "/{report_id}/approve",
    response_model=MonthlyReportOut,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Approve a monthly report (admin)",
)
async def approve_report(
    report_id: int,
    actor: User = Depends(get_current_user),
    svc: ReportService = Depends(get_report_service),
):
    return await svc.approve(actor, report_id)


@router.post(
    "/reminders",
    response_model=ReportReminderOut,
    responses={403: {"model": ErrorResponse}},
    summary="Remind instructors with a missing report (admin)",
)
async def send_reminders(
    payload: ReportReminderRequest,
    actor: User = Depends(get_current_user),
    svc: ReportService = Depends(get_report_service),
):
    pending = await svc.send_due_reminders(actor, month=payload.month, year=payload.year)
    return {"month": payload.month, "year": payload.year, "instructor_ids": pending}
