"""Redis client shared by the snapshot store and assignment history."""

from __future__ import annotations

import redis.asyncio as aioredis

from armora.config import settings

# ── Redis client ─────────────────────────────────────────────────────

redis_client: aioredis.Redis = aioredis.from_url(
    settings.storage.redis_url,
    decode_responses=True,
)


async def close_redis() -> None:
    """Close Redis connections. Called from booking_lifespan() on shutdown."""
    await redis_client.aclose()
