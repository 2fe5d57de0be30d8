from typing import Optional

import redis.asyncio as redis

from backend.tube_api import config


class RedisClient:
    """Shared connection for rate-limit counters, opened by the app lifespan."""

    _client: Optional[redis.Redis] = None

    @classmethod
    async def init(cls):
        if cls._client is not None:
            return
        client = redis.Redis(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            decode_responses=True,
            socket_timeout=config.UPSTREAM_TIMEOUT_SECONDS,
        )
        # raises when the server is unreachable
        await client.ping()
        cls._client = client

    @classmethod
    def get_client(cls) -> redis.Redis:
        if cls._client is None:
            raise RuntimeError("Redis client not initialized")
        return cls._client

    @classmethod
    async def incr_window(cls, key: str, ttl_seconds: int) -> int:
        """Increment a per-window counter and keep it alive for one window."""
        async with cls.get_client().pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, ttl_seconds)
            count, _ = await pipe.execute()
        return int(count)

    @classmethod
    async def close(cls):
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
