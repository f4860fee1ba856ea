"""Job history queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from integrity.models.job import JobReport
from integrity.schemas.job import JobReportResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def list_job_reports(session: AsyncSession, limit: int = 20) -> list[JobReportResponse]:
    """Return the most recent job reports, newest first."""
    stmt = select(JobReport).order_by(JobReport.date_created.desc()).limit(limit)
    result = await session.execute(stmt)
    return [JobReportResponse.model_validate(report) for report in result.scalars().all()]


async def get_job_report(session: AsyncSession, report_id: str) -> JobReport | None:
    return await session.get(JobReport, report_id)
