"""
Redis connection management (session store backend).

The client is built from ``Settings.redis_url`` when the application is
created, kept on ``app.state.redis`` and closed at shutdown.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis
from fastapi import Request


def create_redis(url: str) -> redis.Redis:
    """Create the Redis client. No connection is opened until first use."""
    return redis.from_url(url, decode_responses=True)


def get_redis(request: Request) -> Optional[redis.Redis]:
    """The application's Redis client, or None when Redis is not configured."""
    return getattr(request.app.state, "redis", None)


async def close_redis(client: Optional[redis.Redis]) -> None:
    """Close the Redis connection pool."""
    if client is not None:
        await client.aclose()
