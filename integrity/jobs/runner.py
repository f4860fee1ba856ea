"""In-process job runner: drives a stateful job and records its history."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import asdict, is_dataclass
from typing import TYPE_CHECKING, Any

from integrity.jobs.base import (
    CompletedTaskCount,
    JobReportUpdate,
    JobState,
    JobStatus,
    ProgressSink,
    TaskCount,
    WorkerContext,
)
from integrity.models.job import JobReport
from integrity.services.datetime_service import now_utc
from integrity.services.sync_service import SyncManager

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from integrity.config import Settings
    from integrity.jobs.base import StatefulJob

logger = logging.getLogger(__name__)


class _ReportProgress:
    """Applies progress updates to a job report and forwards them."""

    def __init__(self, report: JobReport, sink: ProgressSink | None) -> None:
        self.report = report
        self.sink = sink

    def __call__(self, updates: list[JobReportUpdate]) -> None:
        for update in updates:
            if isinstance(update, TaskCount):
                self.report.task_count = update.count
            elif isinstance(update, CompletedTaskCount):
                self.report.completed_task_count = update.count
        if self.sink is not None:
            self.sink(updates)


def _dump_data(data: Any) -> str | None:
    if data is None:
        return None
    if is_dataclass(data) and not isinstance(data, type):
        data = asdict(data)
    return json.dumps(data, default=str)


class JobRunner:
    """Runs jobs one step at a time.

    The job works in its own session; the job report lives in a second
    session so that a rollback inside a step never discards report progress.
    ``cancel()`` takes effect at the next step boundary.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        sync: SyncManager | None = None,
        progress_sink: ProgressSink | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._sync = sync or SyncManager(settings.sync_instance_id)
        self._progress_sink = progress_sink
        self._cancel = asyncio.Event()

    def cancel(self) -> None:
        self._cancel.set()

    async def run(self, job: StatefulJob, init: Any) -> JobReport:
        """Run ``job`` to completion.

        Returns the final job report. Any error is recorded on the report as
        ``failed`` and re-raised.
        """
        self._cancel.clear()
        state = JobState(init=init)

        async with (
            self._session_factory() as report_session,
            self._session_factory() as session,
        ):
            report = JobReport(
                id=uuid.uuid4().hex,
                name=job.NAME,
                hash=job.hash(init),
                status=JobStatus.CREATED,
                date_created=now_utc(),
            )
            report_session.add(report)
            await report_session.commit()

            ctx = WorkerContext(
                session=session,
                sync=self._sync,
                settings=self._settings,
                progress_sink=_ReportProgress(report, self._progress_sink),
            )

            try:
                report.status = JobStatus.PLANNING
                report.date_started = now_utc()
                await report_session.commit()

                await job.init(ctx, state)
                await session.commit()

                report.status = JobStatus.EXECUTING
                report.data = _dump_data(state.data)
                await report_session.commit()

                while state.step_number < len(state.steps):
                    if self._cancel.is_set():
                        report.status = JobStatus.CANCELED
                        report.date_completed = now_utc()
                        await report_session.commit()
                        logger.info(
                            "Job %s (%s) canceled after %d of %d steps",
                            job.NAME,
                            report.id,
                            state.step_number,
                            len(state.steps),
                        )
                        return report

                    await job.execute_step(ctx, state)
                    await session.commit()
                    state.step_number += 1
                    await report_session.commit()

                result = await job.finalize(ctx, state)
            except asyncio.CancelledError:
                await session.rollback()
                report.status = JobStatus.CANCELED
                report.date_completed = now_utc()
                await report_session.commit()
                logger.warning(
                    "Job %s (%s) cancelled by its task at step %d",
                    job.NAME,
                    report.id,
                    state.step_number,
                )
                raise
            except Exception as exc:
                await session.rollback()
                report.status = JobStatus.FAILED
                report.errors_text = str(exc)
                report.date_completed = now_utc()
                await report_session.commit()
                logger.error(
                    "Job %s (%s) failed at step %d: %s",
                    job.NAME,
                    report.id,
                    state.step_number,
                    exc,
                )
                raise

            report.status = JobStatus.FINALIZED
            report.result = json.dumps(result)
            report.date_completed = now_utc()
            await report_session.commit()
            logger.info("Job %s (%s) finalized: %d tasks", job.NAME, report.id, report.task_count)
            return report
