"""Redis connection wrapper shared by the Redis repositories."""

import json
from typing import Any

import redis.asyncio as redis

from kitchen_ops.config import get_settings
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)


def _loads(value: Any) -> Any:
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return value


class StateManager:
    """Centralized state access using Redis."""

    def __init__(self, redis_url: str | None = None) -> None:
        self.redis_client: redis.Redis | None = None
        self.redis_url = redis_url or get_settings().redis_url

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self.redis_client is None:
            self.redis_client = await redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("redis_connected", url=self.redis_url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("redis_disconnected")

    async def ping(self) -> bool:
        """Check the server answers."""
        if not self.redis_client:
            await self.connect()

        return bool(await self.redis_client.ping())

    async def set(self, key: str, value: Any) -> None:
        """Set a value in Redis."""
        if not self.redis_client:
            await self.connect()

        # Serialize complex objects to JSON
        if isinstance(value, (dict, list)):
            value = json.dumps(value)

        await self.redis_client.set(key, value)
        logger.debug("state_set", key=key)

    async def get(self, key: str) -> Any:
        """Get a value from Redis."""
        if not self.redis_client:
            await self.connect()

        value = await self.redis_client.get(key)
        return _loads(value) if value else None

    async def delete(self, key: str) -> None:
        """Delete a key from Redis."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.delete(key)
        logger.debug("state_deleted", key=key)

    async def hset(self, key: str, field: str, value: Any) -> None:
        """Set a hash field."""
        if not self.redis_client:
            await self.connect()

        if isinstance(value, (dict, list)):
            value = json.dumps(value)

        await self.redis_client.hset(key, field, value)

    async def hget(self, key: str, field: str) -> Any:
        """Get a hash field."""
        if not self.redis_client:
            await self.connect()

        value = await self.redis_client.hget(key, field)
        return _loads(value) if value else None

    async def hgetall(self, key: str) -> dict[str, Any]:
        """Get all hash fields."""
        if not self.redis_client:
            await self.connect()

        data = await self.redis_client.hgetall(key)
        return {field: _loads(value) for field, value in data.items()}

    async def hdel(self, key: str, *fields: str) -> None:
        """Remove hash fields."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.hdel(key, *fields)

    async def zadd(self, key: str, mapping: dict[str, float]) -> None:
        """Add members to a sorted set."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.zadd(key, mapping)

    async def zrevrange(self, key: str, start: int = 0, end: int = -1) -> list[str]:
        """Get members from a sorted set, highest score first."""
        if not self.redis_client:
            await self.connect()

        return await self.redis_client.zrevrange(key, start, end)

    async def zremrangebyscore(
        self, key: str, low: float | str, high: float | str
    ) -> int:
        """Remove sorted set members scored within a range."""
        if not self.redis_client:
            await self.connect()

        return await self.redis_client.zremrangebyscore(key, low, high)

    async def flush(self) -> None:
        """Delete every key in the current database."""
        if not self.redis_client:
            await self.connect()

        await self.redis_client.flushdb()
        logger.warning("state_flushed", url=self.redis_url)
