"""Object validator job: compute integrity checksums for catalogued files.

The job plans every file in a location (or a sub directory of it) whose
``integrity_checksum`` is missing, then hashes them one per step. Each new
checksum is written together with a sync operation so other replicas pick it
up. Resuming after an interruption is just running the job again: the
planning query no longer returns files completed by the earlier run.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from integrity.exceptions import FileIOError, MissingFieldError, SubPathNotFoundError
from integrity.filesystem.isolated_path import IsolatedFilePath
from integrity.filesystem.path_checks import (
    ensure_sub_path_is_directory,
    ensure_sub_path_is_in_location,
    is_root_sub_path,
    normalize_sub_path,
)
from integrity.jobs.base import CompletedTaskCount, JobState, TaskCount, WorkerContext
from integrity.schemas.job import ObjectValidatorJobInit
from integrity.services import catalog_service
from integrity.services.hash_service import file_checksum
from integrity.services.sync_service import FILE_PATH_MODEL, SyncId

if TYPE_CHECKING:
    from integrity.services.catalog_service import FilePathForValidator

logger = logging.getLogger(__name__)

INTEGRITY_CHECKSUM_FIELD = "integrity_checksum"


@dataclass
class ObjectValidatorJobState:
    location_path: Path
    task_count: int


def validator_job_hash(init: ObjectValidatorJobInit) -> str:
    """Hash the fields that identify a validator submission.

    Only the location id and the sub path take part. The sub path is taken
    relative to the location root, so equivalent spellings of one directory
    hash alike and an empty or root sub path is the same job as none.
    """
    location_path = Path(init.location.path) if init.location.path is not None else None
    sub_path = normalize_sub_path(location_path, init.sub_path)
    canonical = json.dumps(
        [
            ObjectValidatorJob.NAME,
            init.location.id,
            sub_path.as_posix() if sub_path is not None else None,
        ],
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ObjectValidatorJob:
    """Generates integrity checksums for files that lack one."""

    NAME: ClassVar[str] = "object_validator"
    init_model: ClassVar[type[ObjectValidatorJobInit]] = ObjectValidatorJobInit

    def hash(self, init: ObjectValidatorJobInit) -> str:
        return validator_job_hash(init)

    async def init(self, ctx: WorkerContext, state: JobState) -> None:
        init: ObjectValidatorJobInit = state.init
        location_id = init.location.id

        if init.location.path is None:
            raise MissingFieldError("location.path")
        location_path = Path(init.location.path)

        children_prefix: str | None = None
        if init.sub_path is not None and not is_root_sub_path(init.sub_path):
            full_path = ensure_sub_path_is_in_location(location_path, init.sub_path)
            ensure_sub_path_is_directory(full_path, init.sub_path)

            sub_iso_file_path = IsolatedFilePath.from_full_path(
                location_id, location_path.resolve(), full_path, is_dir=True
            )
            if not await catalog_service.file_path_exists(ctx.session, sub_iso_file_path):
                raise SubPathNotFoundError(init.sub_path)
            children_prefix = sub_iso_file_path.materialized_path_for_children()

        state.steps.extend(
            await catalog_service.find_file_paths_for_validator(
                ctx.session, location_id, children_prefix
            )
        )
        state.data = ObjectValidatorJobState(
            location_path=location_path,
            task_count=len(state.steps),
        )
        logger.info(
            "Validator planned %d files in location %d%s",
            len(state.steps),
            location_id,
            f" under {children_prefix}" if children_prefix else "",
        )

        ctx.progress([TaskCount(len(state.steps))])

    async def execute_step(self, ctx: WorkerContext, state: JobState) -> None:
        data: ObjectValidatorJobState = state.require_data()
        file_path: FilePathForValidator = state.current_step

        # Another actor may have checksummed (or removed) the file since planning.
        current = await catalog_service.get_file_path(ctx.session, file_path.pub_id)
        if current is None:
            logger.warning("Skipping %s: removed from catalog since planning", file_path.pub_id)
        elif current.integrity_checksum is not None:
            logger.debug("Skipping %s: checksum already present", file_path.pub_id)
        else:
            iso_file_path = file_path.isolated(state.init.location.id)
            full_path = data.location_path / iso_file_path.relative_path()
            try:
                checksum = await file_checksum(full_path, ctx.settings.checksum_chunk_size)
            except OSError as exc:
                raise FileIOError(full_path, exc) from exc

            written = await ctx.sync.write_op(
                ctx.session,
                ctx.sync.shared_update(
                    SyncId(model=FILE_PATH_MODEL, pub_id=file_path.pub_id),
                    INTEGRITY_CHECKSUM_FIELD,
                    checksum,
                ),
                catalog_service.set_integrity_checksum(file_path.pub_id, checksum),
            )
            if not written:
                logger.debug("Checksum for %s was set concurrently", file_path.pub_id)

        ctx.progress([CompletedTaskCount(state.step_number + 1)])

    async def finalize(self, ctx: WorkerContext, state: JobState) -> Any:
        data: ObjectValidatorJobState = state.require_data()
        init: ObjectValidatorJobInit = state.init
        scope = data.location_path
        sub_path = normalize_sub_path(data.location_path, init.sub_path)
        if sub_path is not None:
            scope = scope / sub_path
        logger.info("finalizing validator job at %s: %d tasks", scope, data.task_count)

        return init.model_dump(mode="json")
