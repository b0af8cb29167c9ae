"""Redis client and store construction used by application startup."""

from __future__ import annotations

from redis.asyncio import Redis

from group_scoreboard.config import DEFAULT_REDIS_URL, Settings
from group_scoreboard.storage.snapshots import RedisSnapshotStore


def create_redis_client(redis_url: str | None = None) -> Redis:
    return Redis.from_url(redis_url or DEFAULT_REDIS_URL, decode_responses=True)


def create_redis_store(settings: Settings) -> RedisSnapshotStore:
    return RedisSnapshotStore(create_redis_client(settings.redis_url), key=settings.redis_key)
