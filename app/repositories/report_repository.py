from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import MonthlyReport


class MonthlyReportRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, report_id: int) -> MonthlyReport | None:
        return await self._session.get(MonthlyReport, int(report_id))

    async def find(self, *, instructor_id: int, month: int, year: int) -> MonthlyReport | None:
        stmt = select(MonthlyReport).where(
            MonthlyReport.instructor_id == instructor_id,
            MonthlyReport.month == month,
            MonthlyReport.year == year,
        )
        return (await self._session.scalars(stmt)).first()

    async def filed_instructor_ids(self, *, month: int, year: int) -> set[int]:
        stmt = select(MonthlyReport.instructor_id).where(
            MonthlyReport.month == month, MonthlyReport.year == year
        )
        return {int(i) for i in (await self._session.scalars(stmt)).all()}

    async def list(self, *, instructor_id: int | None = None) -> list[MonthlyReport]:
        stmt = select(MonthlyReport)
        if instructor_id is not None:
            stmt = stmt.where(MonthlyReport.instructor_id == instructor_id)
        stmt = stmt.order_by(
            MonthlyReport.year.desc(), MonthlyReport.month.desc(), MonthlyReport.id.desc()
        )
        return list((await self._session.scalars(stmt)).all())

    async def create(
        self, *, instructor_id: int, month: int, year: int, workshops_count: int
    ) -> MonthlyReport:
        report = MonthlyReport(
            instructor_id=instructor_id,
            month=month,
            year=year,
            workshops_count=workshops_count,
            approved=False,
        )
        self._session.add(report)
        await self._session.flush()
        return report

    async def approve(self, report: MonthlyReport, *, approved_by_id: int) -> MonthlyReport:
        report.approved = True
        report.approved_by_id = approved_by_id
        await self._session.flush()
        return report
