"""Tests for replication log operations paired with catalog writes."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import OperationalError

from integrity.models.file_path import FilePath
from integrity.models.sync import SyncOperation
from integrity.services import catalog_service
from integrity.services.sync_service import FILE_PATH_MODEL, SHARED_UPDATE, SyncId, SyncManager
from tests.conftest import PRESET_CHECKSUM

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from integrity.models.location import Location


async def _pub_id(session: AsyncSession, name: str) -> str:
    pub_id = await session.scalar(select(FilePath.pub_id).where(FilePath.name == name))
    assert pub_id is not None
    return pub_id


async def _sync_op_count(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(SyncOperation)) or 0


class TestSharedUpdate:
    def test_describes_field_update(self) -> None:
        sync = SyncManager("replica-1")
        op = sync.shared_update(SyncId(FILE_PATH_MODEL, "abc"), "integrity_checksum", "ff00")
        assert op.instance_id == "replica-1"
        assert op.model == FILE_PATH_MODEL
        assert op.record_id == "abc"
        assert op.kind == SHARED_UPDATE
        assert op.field == "integrity_checksum"
        assert op.value == "ff00"

    def test_timestamps_strictly_increase_when_clock_stalls(self) -> None:
        frozen = datetime(2026, 1, 1, tzinfo=UTC)
        sync = SyncManager("replica-1")
        with patch("integrity.services.sync_service.now_utc", return_value=frozen):
            first = sync.shared_update(SyncId(FILE_PATH_MODEL, "a"), "f", 1)
            second = sync.shared_update(SyncId(FILE_PATH_MODEL, "b"), "f", 2)
        assert first.timestamp == frozen
        assert second.timestamp == frozen + timedelta(microseconds=1)


class TestWriteOp:
    async def test_commits_mutation_and_operation(
        self, db_session: AsyncSession, scenario_location: Location
    ) -> None:
        sync = SyncManager("replica-1")
        pub_id = await _pub_id(db_session, "a")

        written = await sync.write_op(
            db_session,
            sync.shared_update(SyncId(FILE_PATH_MODEL, pub_id), "integrity_checksum", "cafe"),
            catalog_service.set_integrity_checksum(pub_id, "cafe"),
        )

        assert written is True
        record = await catalog_service.get_file_path(db_session, pub_id)
        assert record is not None
        assert record.integrity_checksum == "cafe"
        ops = (await db_session.execute(select(SyncOperation))).scalars().all()
        assert len(ops) == 1
        assert ops[0].record_id == pub_id
        assert ops[0].field == "integrity_checksum"
        assert json.loads(ops[0].value) == "cafe"
        assert ops[0].instance_id == "replica-1"

    async def test_unmatched_mutation_logs_nothing(
        self, db_session: AsyncSession, scenario_location: Location
    ) -> None:
        sync = SyncManager("replica-1")
        pub_id = await _pub_id(db_session, "b")

        written = await sync.write_op(
            db_session,
            sync.shared_update(SyncId(FILE_PATH_MODEL, pub_id), "integrity_checksum", "cafe"),
            catalog_service.set_integrity_checksum(pub_id, "cafe"),
        )

        assert written is False
        assert await _sync_op_count(db_session) == 0
        record = await catalog_service.get_file_path(db_session, pub_id)
        assert record is not None
        assert record.integrity_checksum == PRESET_CHECKSUM

    async def test_failed_mutation_rolls_back_and_propagates(
        self, db_session: AsyncSession, scenario_location: Location
    ) -> None:
        sync = SyncManager("replica-1")

        with pytest.raises(OperationalError):
            await sync.write_op(
                db_session,
                sync.shared_update(SyncId(FILE_PATH_MODEL, "x"), "integrity_checksum", "cafe"),
                text("UPDATE no_such_table SET integrity_checksum = 'cafe'"),
            )

        assert await _sync_op_count(db_session) == 0
