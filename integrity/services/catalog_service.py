"""Catalog service: file path queries, checksum updates, and indexing."""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import func, select, update

from integrity.filesystem.isolated_path import IsolatedFilePath
from integrity.models.file_path import FilePath
from integrity.services.datetime_service import now_utc

if TYPE_CHECKING:
    from sqlalchemy import Update
    from sqlalchemy.ext.asyncio import AsyncSession

    from integrity.models.location import Location

logger = logging.getLogger(__name__)


@dataclass
class FilePathForValidator:
    """The columns of a file path the validator needs for one step."""

    id: int
    pub_id: str
    materialized_path: str
    name: str
    extension: str
    integrity_checksum: str | None

    def isolated(self, location_id: int) -> IsolatedFilePath:
        return IsolatedFilePath(
            location_id=location_id,
            materialized_path=self.materialized_path,
            name=self.name,
            extension=self.extension,
            is_dir=False,
        )


async def file_path_exists(session: AsyncSession, iso_path: IsolatedFilePath) -> bool:
    """Check whether the catalog has an entry for the given path."""
    stmt = select(FilePath.id).where(
        FilePath.location_id == iso_path.location_id,
        FilePath.materialized_path == iso_path.materialized_path,
        FilePath.name == iso_path.name,
        FilePath.extension == iso_path.extension,
        FilePath.is_dir == iso_path.is_dir,
    )
    return (await session.scalar(stmt.limit(1))) is not None


async def find_file_paths_for_validator(
    session: AsyncSession,
    location_id: int,
    children_prefix: str | None = None,
) -> list[FilePathForValidator]:
    """Find files in a location that have no integrity checksum yet.

    When ``children_prefix`` is given, only files whose materialized path
    starts with it are returned.
    """
    stmt = select(
        FilePath.id,
        FilePath.pub_id,
        FilePath.materialized_path,
        FilePath.name,
        FilePath.extension,
        FilePath.integrity_checksum,
    ).where(
        FilePath.location_id == location_id,
        FilePath.is_dir.is_(False),
        FilePath.integrity_checksum.is_(None),
    )
    if children_prefix is not None:
        # Compared by substring: SQLite LIKE folds ASCII case.
        stmt = stmt.where(
            func.substr(FilePath.materialized_path, 1, len(children_prefix)) == children_prefix
        )

    result = await session.execute(stmt.order_by(FilePath.id))
    return [
        FilePathForValidator(
            id=row.id,
            pub_id=row.pub_id,
            materialized_path=row.materialized_path,
            name=row.name,
            extension=row.extension,
            integrity_checksum=row.integrity_checksum,
        )
        for row in result.all()
    ]


async def get_file_path(session: AsyncSession, pub_id: str) -> FilePath | None:
    """Load a file path fresh from the database, bypassing the identity map."""
    stmt = (
        select(FilePath)
        .where(FilePath.pub_id == pub_id)
        .execution_options(populate_existing=True)
    )
    return await session.scalar(stmt)


def set_integrity_checksum(pub_id: str, checksum: str) -> Update:
    """Build the update that stores a checksum on a record still lacking one."""
    return (
        update(FilePath)
        .where(FilePath.pub_id == pub_id, FilePath.integrity_checksum.is_(None))
        .values(integrity_checksum=checksum)
    )


def scan_location_entries(
    location_id: int, location_path: Path, *, include_hidden: bool = False
) -> list[IsolatedFilePath]:
    """Walk a location and return every directory and file below its root."""
    entries: list[IsolatedFilePath] = []
    for root, dirs, files in os.walk(location_path):
        if not include_hidden:
            dirs[:] = [d for d in dirs if not d.startswith(".")]
        dirs.sort()
        for dirname in dirs:
            full = Path(root) / dirname
            entries.append(
                IsolatedFilePath.from_full_path(location_id, location_path, full, is_dir=True)
            )
        for filename in sorted(files):
            if not include_hidden and filename.startswith("."):
                continue
            full = Path(root) / filename
            entries.append(
                IsolatedFilePath.from_full_path(location_id, location_path, full, is_dir=False)
            )
    return entries


async def index_location(
    session: AsyncSession, location: Location, *, include_hidden: bool = False
) -> int:
    """Add catalog entries for files and directories not yet tracked.

    Existing entries, including their checksums, are left untouched.
    Returns the number of entries added.
    """
    if location.path is None:
        msg = f"Location {location.id} has no path"
        raise ValueError(msg)

    location_path = Path(location.path)
    scanned = await asyncio.to_thread(
        scan_location_entries, location.id, location_path, include_hidden=include_hidden
    )

    result = await session.execute(
        select(FilePath.materialized_path, FilePath.name, FilePath.extension).where(
            FilePath.location_id == location.id
        )
    )
    known = {(row.materialized_path, row.name, row.extension) for row in result.all()}

    added = 0
    indexed_at = now_utc()
    for entry in scanned:
        key = (entry.materialized_path, entry.name, entry.extension)
        if key in known:
            continue
        session.add(
            FilePath(
                pub_id=uuid.uuid4().hex,
                location_id=location.id,
                materialized_path=entry.materialized_path,
                name=entry.name,
                extension=entry.extension,
                is_dir=entry.is_dir,
                integrity_checksum=None,
                date_indexed=indexed_at,
            )
        )
        known.add(key)
        added += 1

    await session.commit()
    logger.info("Indexed location %d: %d new entries", location.id, added)
    return added
