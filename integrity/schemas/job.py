"""Job init payloads and history schemas."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LocationData(BaseModel):
    """Snapshot of a location as handed to a job."""

    id: int
    pub_id: str
    name: str | None = None
    path: str | None = None


class ObjectValidatorJobInit(BaseModel):
    """Init payload for the object validator job."""

    location: LocationData
    sub_path: Path | None = None


class JobReportResponse(BaseModel):
    """A job history entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    status: str
    task_count: int = Field(ge=0)
    completed_task_count: int = Field(ge=0)
    errors_text: str | None = None
    date_created: datetime
    date_completed: datetime | None = None
