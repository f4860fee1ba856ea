"""Shared test fixtures for the integrity validator."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from integrity.config import Settings
from integrity.database import init_database
from integrity.filesystem.isolated_path import IsolatedFilePath
from integrity.models.file_path import FilePath
from integrity.models.location import Location
from integrity.services.datetime_service import now_utc

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

PRESET_CHECKSUM = "deadbeef"


async def add_location(session: AsyncSession, path: Path | None) -> Location:
    """Insert a location row directly, bypassing path validation."""
    location = Location(
        pub_id=uuid.uuid4().hex,
        name=path.name if path is not None else None,
        path=str(path) if path is not None else None,
        date_created=now_utc(),
    )
    session.add(location)
    await session.commit()
    return location


async def add_file_path(
    session: AsyncSession,
    location: Location,
    rel_path: str,
    *,
    is_dir: bool = False,
    checksum: str | None = None,
) -> FilePath:
    """Insert a catalog entry for ``rel_path`` inside ``location``."""
    iso = IsolatedFilePath.from_relative(location.id, rel_path, is_dir=is_dir)
    file_path = FilePath(
        pub_id=uuid.uuid4().hex,
        location_id=location.id,
        materialized_path=iso.materialized_path,
        name=iso.name,
        extension=iso.extension,
        is_dir=is_dir,
        integrity_checksum=checksum,
        date_indexed=now_utc(),
    )
    session.add(file_path)
    await session.commit()
    return file_path


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings with a temporary database."""
    db_path = tmp_path / "test.db"
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        checksum_chunk_size=4096,
        sync_instance_id="test-instance",
    )


@pytest.fixture
def location_dir(tmp_path: Path) -> Path:
    """Create a location directory with a.txt, b.txt and dir/c.txt."""
    root = tmp_path / "location"
    root.mkdir()
    (root / "a.txt").write_text("alpha\n")
    (root / "b.txt").write_text("bravo\n")
    (root / "dir").mkdir()
    (root / "dir" / "c.txt").write_text("charlie\n")
    return root


@pytest.fixture
async def db_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create a test database engine with all tables."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
    )
    await init_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def scenario_location(db_session: AsyncSession, location_dir: Path) -> Location:
    """Catalog for location_dir: b.txt already has a checksum, a.txt and dir/c.txt do not."""
    location = await add_location(db_session, location_dir)
    await add_file_path(db_session, location, "a.txt")
    await add_file_path(db_session, location, "b.txt", checksum=PRESET_CHECKSUM)
    await add_file_path(db_session, location, "dir", is_dir=True)
    await add_file_path(db_session, location, "dir/c.txt")
    return location
