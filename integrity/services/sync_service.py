"""Sync service: replication log operations paired with catalog writes."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from integrity.models.sync import SyncOperation
from integrity.services.datetime_service import now_utc

if TYPE_CHECKING:
    from sqlalchemy import Executable
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

FILE_PATH_MODEL = "file_path"
SHARED_UPDATE = "u"


@dataclass(frozen=True)
class SyncId:
    """Identity of a replicated record: its model and public id."""

    model: str
    pub_id: str


@dataclass(frozen=True)
class CRDTOperation:
    """A field mutation ready to be written to the replication log."""

    instance_id: str
    timestamp: datetime
    model: str
    record_id: str
    kind: str
    field: str
    value: Any


class SyncManager:
    """Creates replication log operations and writes them with their mutation."""

    def __init__(self, instance_id: str) -> None:
        self.instance_id = instance_id
        self._last_timestamp: datetime | None = None

    def _next_timestamp(self) -> datetime:
        # Strictly increasing per instance, even if the clock stalls or steps back.
        ts = now_utc()
        if self._last_timestamp is not None and ts <= self._last_timestamp:
            ts = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = ts
        return ts

    def shared_update(self, sync_id: SyncId, field: str, value: Any) -> CRDTOperation:
        """Describe an update of one field on a shared record."""
        return CRDTOperation(
            instance_id=self.instance_id,
            timestamp=self._next_timestamp(),
            model=sync_id.model,
            record_id=sync_id.pub_id,
            kind=SHARED_UPDATE,
            field=field,
            value=value,
        )

    async def write_op(
        self, session: AsyncSession, op: CRDTOperation, mutation: Executable
    ) -> bool:
        """Execute ``mutation`` and log ``op`` in a single transaction.

        If the mutation matches no rows, nothing is committed and the
        operation is not logged. Returns True when both were committed.
        """
        try:
            result = await session.execute(mutation)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                await session.rollback()
                logger.debug(
                    "Mutation for %s %s matched no rows; sync operation dropped",
                    op.model,
                    op.record_id,
                )
                return False
            session.add(
                SyncOperation(
                    instance_id=op.instance_id,
                    timestamp=op.timestamp,
                    model=op.model,
                    record_id=op.record_id,
                    kind=op.kind,
                    field=op.field,
                    value=json.dumps(op.value),
                )
            )
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
        return True
