"""Job registry keyed by job name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from integrity.jobs.object_validator import ObjectValidatorJob

if TYPE_CHECKING:
    from pydantic import BaseModel

    from integrity.jobs.base import StatefulJob

JOBS: dict[str, type[ObjectValidatorJob]] = {
    ObjectValidatorJob.NAME: ObjectValidatorJob,
}


def get_job(name: str) -> StatefulJob:
    """Instantiate the job registered under ``name``.

    Raises ValueError if the name is unknown.
    """
    job_cls = JOBS.get(name)
    if job_cls is None:
        msg = f"Unknown job: {name!r}. Available: {list(JOBS)}"
        raise ValueError(msg)
    return job_cls()


def parse_init(name: str, payload: dict[str, Any]) -> BaseModel:
    """Validate an init payload for the named job.

    Raises ValueError (pydantic ValidationError) on a malformed payload.
    """
    return get_job(name).init_model.model_validate(payload)


def list_jobs() -> list[str]:
    """Return the list of registered job names."""
    return list(JOBS.keys())
