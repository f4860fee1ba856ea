"""Job error types.

Convention:
- ``JobError`` and its subclasses abort the running job. The runner records
  ``str(exc)`` as the job's failure reason and re-raises.
- Catalog write failures surface as ``sqlalchemy.exc.SQLAlchemyError`` and are
  not wrapped.
- ``ValueError`` is used for invalid requests outside a job (unknown job name,
  bad location path) and is safe to show to CLI users.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class JobError(Exception):
    """Base class for errors that terminate a job."""


class MissingFieldError(JobError):
    """Raised when the job init payload lacks a required field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing field: {field}")


class ValidatorError(JobError):
    """Base class for object validator failures."""


class SubPathNotFoundError(ValidatorError):
    """Raised when the requested sub path does not exist on disk or in the catalog."""

    def __init__(self, sub_path: Path) -> None:
        self.sub_path = sub_path
        super().__init__(f"Sub path not found: {sub_path}")


class SubPathOutsideLocationError(ValidatorError):
    """Raised when the requested sub path resolves outside the location root."""

    def __init__(self, location_path: Path, sub_path: Path) -> None:
        self.location_path = location_path
        self.sub_path = sub_path
        super().__init__(f"Sub path {sub_path} is not inside location {location_path}")


class SubPathNotADirectoryError(ValidatorError):
    """Raised when the requested sub path is not a directory."""

    def __init__(self, sub_path: Path) -> None:
        self.sub_path = sub_path
        super().__init__(f"Sub path is not a directory: {sub_path}")


class FileIOError(ValidatorError):
    """Raised when a tracked file cannot be read for hashing.

    The underlying ``OSError`` is available as ``source`` and as ``__cause__``.
    """

    def __init__(self, path: Path, source: OSError) -> None:
        self.path = path
        self.source = source
        super().__init__(f"I/O error at {path}: {source}")
