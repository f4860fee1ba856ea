"""Location service: registration and lookup of tracked roots."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import select

from integrity.models.location import Location
from integrity.schemas.job import LocationData
from integrity.services.datetime_service import now_utc

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def create_location(session: AsyncSession, path: Path, name: str | None = None) -> Location:
    """Register a directory as a location.

    Raises ValueError if the path is not a directory or is already registered.
    """
    resolved = path.resolve()
    if not resolved.is_dir():
        msg = f"Location path is not a directory: {path}"
        raise ValueError(msg)

    existing = await session.scalar(select(Location).where(Location.path == str(resolved)))
    if existing is not None:
        msg = f"Location already registered with id {existing.id}: {resolved}"
        raise ValueError(msg)

    location = Location(
        pub_id=uuid.uuid4().hex,
        name=name or resolved.name,
        path=str(resolved),
        date_created=now_utc(),
    )
    session.add(location)
    await session.commit()
    logger.info("Registered location %d at %s", location.id, resolved)
    return location


async def get_location(session: AsyncSession, location_id: int) -> Location | None:
    """Get a location by id."""
    return await session.get(Location, location_id)


def location_to_data(location: Location) -> LocationData:
    return LocationData(
        id=location.id,
        pub_id=location.pub_id,
        name=location.name,
        path=location.path,
    )
