"""Job framework: state, progress updates, and the stateful job protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from integrity.exceptions import JobError

if TYPE_CHECKING:
    from pydantic import BaseModel
    from sqlalchemy.ext.asyncio import AsyncSession

    from integrity.config import Settings
    from integrity.services.sync_service import SyncManager


class JobStatus(StrEnum):
    """Lifecycle of a job run."""

    CREATED = "created"
    PLANNING = "planning"
    EXECUTING = "executing"
    FINALIZED = "finalized"
    FAILED = "failed"
    CANCELED = "canceled"


@dataclass(frozen=True)
class TaskCount:
    count: int


@dataclass(frozen=True)
class CompletedTaskCount:
    count: int


JobReportUpdate = TaskCount | CompletedTaskCount


class ProgressSink(Protocol):
    """Receives progress updates from a running job."""

    def __call__(self, updates: list[JobReportUpdate]) -> None: ...


@dataclass
class JobState:
    """Mutable state of one job run.

    ``steps`` is owned by the state and indexed by ``step_number``; it is
    filled once during init and not modified afterwards.
    """

    init: Any
    data: Any = None
    steps: list[Any] = field(default_factory=list)
    step_number: int = 0

    def require_data(self) -> Any:
        if self.data is None:
            msg = "Job data is missing; init has not completed"
            raise JobError(msg)
        return self.data

    @property
    def current_step(self) -> Any:
        return self.steps[self.step_number]


@dataclass
class WorkerContext:
    """What a job may touch while running."""

    session: AsyncSession
    sync: SyncManager
    settings: Settings
    progress_sink: ProgressSink | None = None

    def progress(self, updates: list[JobReportUpdate]) -> None:
        if self.progress_sink is not None:
            self.progress_sink(updates)


@runtime_checkable
class StatefulJob(Protocol):
    """Protocol for jobs driven step by step by the runner."""

    NAME: ClassVar[str]
    init_model: ClassVar[type[BaseModel]]

    def hash(self, init: Any) -> str:
        """Canonical identity of a job submission."""
        ...

    async def init(self, ctx: WorkerContext, state: JobState) -> None:
        """Plan the job: populate ``state.data`` and ``state.steps``."""
        ...

    async def execute_step(self, ctx: WorkerContext, state: JobState) -> None:
        """Run ``state.steps[state.step_number]``."""
        ...

    async def finalize(self, ctx: WorkerContext, state: JobState) -> Any:
        """Return a JSON-compatible result artifact."""
        ...
