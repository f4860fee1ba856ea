"""SQLAlchemy ORM models for the catalog."""

from integrity.models.base import Base
from integrity.models.file_path import FilePath
from integrity.models.job import JobReport
from integrity.models.location import Location
from integrity.models.sync import SyncOperation

__all__ = [
    "Base",
    "FilePath",
    "JobReport",
    "Location",
    "SyncOperation",
]
