"""Assignment history — the persistence collaborator for confirmed bookings.

Confirmed assignments are pushed to a capped Redis list, newest first.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from pydantic import ValidationError

from armora.config import settings
from armora.schemas.booking import ConfirmedAssignment

logger = logging.getLogger(__name__)


class RedisAssignmentHistory:
    """Implements the HistoryCollaborator interface on a Redis list."""

    def __init__(
        self,
        redis: aioredis.Redis,
        key: str | None = None,
        max_length: int | None = None,
    ) -> None:
        self._redis = redis
        self._key = key if key is not None else settings.storage.history_key
        self._max_length = max_length if max_length is not None else settings.storage.history_max_length

    async def record(self, assignment: ConfirmedAssignment) -> None:
        """Prepend a confirmed assignment and trim the list."""
        await self._redis.lpush(self._key, assignment.model_dump_json())
        await self._redis.ltrim(self._key, 0, self._max_length - 1)
        logger.info(
            "Assignment recorded: tier=%s fee=%s",
            assignment.quote.tier_id.value,
            assignment.quote.final_fee,
        )

    async def recent(self, limit: int = 10) -> list[ConfirmedAssignment]:
        """Return up to ``limit`` assignments, newest first. Unreadable rows are skipped."""
        rows = await self._redis.lrange(self._key, 0, limit - 1)
        assignments: list[ConfirmedAssignment] = []
        for row in rows:
            try:
                assignments.append(ConfirmedAssignment.model_validate_json(row))
            except ValidationError:
                logger.warning("Skipping unreadable assignment history row")
        return assignments

    async def recent_destinations(self, limit: int | None = None) -> list[str]:
        """Distinct destinations from recent assignments, newest first.

        Feeds the location-entry collaborator when a new flow starts.
        """
        cap = limit if limit is not None else settings.booking.recent_destinations_limit
        seen: list[str] = []
        for assignment in await self.recent(self._max_length):
            destination = assignment.draft.destination_location.strip()
            if destination and destination not in seen:
                seen.append(destination)
            if len(seen) >= cap:
                break
        return seen
