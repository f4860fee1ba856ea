"""Application entry points: logging setup and job orchestration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from integrity.database import create_engine, init_database
from integrity.jobs.object_validator import ObjectValidatorJob
from integrity.jobs.registry import get_job, parse_init
from integrity.jobs.runner import JobRunner
from integrity.services import catalog_service, job_service, location_service

if TYPE_CHECKING:
    from integrity.config import Settings
    from integrity.jobs.base import ProgressSink
    from integrity.models.job import JobReport
    from integrity.models.location import Location
    from integrity.schemas.job import JobReportResponse

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


async def add_location(settings: Settings, path: Path, name: str | None = None) -> Location:
    engine, session_factory = create_engine(settings)
    try:
        await init_database(engine)
        async with session_factory() as session:
            return await location_service.create_location(session, path, name)
    finally:
        await engine.dispose()


async def index_location(settings: Settings, location_id: int) -> int:
    """Index a registered location. Raises ValueError for an unknown id."""
    engine, session_factory = create_engine(settings)
    try:
        await init_database(engine)
        async with session_factory() as session:
            location = await location_service.get_location(session, location_id)
            if location is None:
                msg = f"Unknown location: {location_id}"
                raise ValueError(msg)
            return await catalog_service.index_location(
                session, location, include_hidden=settings.index_hidden_files
            )
    finally:
        await engine.dispose()


async def run_object_validator(
    settings: Settings,
    location_id: int,
    sub_path: Path | None = None,
    progress_sink: ProgressSink | None = None,
) -> JobReport:
    """Run the object validator over a registered location.

    Raises ValueError for an unknown location and JobError if the job fails.
    """
    engine, session_factory = create_engine(settings)
    try:
        await init_database(engine)
        async with session_factory() as session:
            location = await location_service.get_location(session, location_id)
            if location is None:
                msg = f"Unknown location: {location_id}"
                raise ValueError(msg)
            location_data = location_service.location_to_data(location)

        init = parse_init(
            ObjectValidatorJob.NAME,
            {"location": location_data.model_dump(), "sub_path": sub_path},
        )
        runner = JobRunner(session_factory, settings, progress_sink=progress_sink)
        return await runner.run(get_job(ObjectValidatorJob.NAME), init)
    finally:
        await engine.dispose()


async def list_jobs(settings: Settings, limit: int = 20) -> list[JobReportResponse]:
    engine, session_factory = create_engine(settings)
    try:
        await init_database(engine)
        async with session_factory() as session:
            return await job_service.list_job_reports(session, limit)
    finally:
        await engine.dispose()
