"""Draft snapshot persistence — Redis-backed store for exported drafts.

The configurator only produces DraftSnapshot objects; this store is the
external collaborator that decides when and where they are kept.
"""

from __future__ import annotations

import logging
import uuid

import redis.asyncio as aioredis
from pydantic import ValidationError

from armora.config import settings
from armora.events import emit
from armora.schemas.booking import DraftSnapshot
from armora.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Saves and loads draft snapshots keyed by booking flow id."""

    def __init__(
        self,
        redis: aioredis.Redis,
        key_prefix: str | None = None,
        ttl: int | None = None,
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix if key_prefix is not None else settings.storage.snapshot_key_prefix
        self._ttl = ttl if ttl is not None else settings.storage.snapshot_ttl

    def _key(self, flow_id: uuid.UUID) -> str:
        return f"{self._prefix}{flow_id}"

    async def save(self, flow_id: uuid.UUID, snapshot: DraftSnapshot) -> None:
        """Store a snapshot, replacing any previous one for this flow."""
        await self._redis.setex(self._key(flow_id), self._ttl, snapshot.model_dump_json())
        logger.debug("Snapshot saved: flow=%s", flow_id)

        await emit(SystemEvent(
            event_type=EventType.SNAPSHOT_SAVED,
            flow_id=flow_id,
            data={"ttl": self._ttl},
            source_module="storage.snapshots",
        ))

    async def load(self, flow_id: uuid.UUID) -> DraftSnapshot | None:
        """Return the stored snapshot, or None if missing or unreadable.

        Unreadable entries (e.g. written by an older schema) are deleted.
        """
        raw = await self._redis.get(self._key(flow_id))
        if raw is None:
            return None

        try:
            snapshot = DraftSnapshot.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable snapshot for flow %s", flow_id)
            await self._redis.delete(self._key(flow_id))
            return None

        await emit(SystemEvent(
            event_type=EventType.SNAPSHOT_LOADED,
            flow_id=flow_id,
            source_module="storage.snapshots",
        ))
        return snapshot

    async def delete(self, flow_id: uuid.UUID) -> bool:
        """Remove a snapshot. Returns True if one existed."""
        removed = await self._redis.delete(self._key(flow_id))
        if removed:
            await emit(SystemEvent(
                event_type=EventType.SNAPSHOT_DELETED,
                flow_id=flow_id,
                source_module="storage.snapshots",
            ))
        return bool(removed)
