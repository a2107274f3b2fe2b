# backend/app/redis_client.py
"""
Shared Redis connection.

Redis is optional: without REDIS_URL the catalog cache is bypassed
and events are not queued.
"""

from typing import Optional

from redis import Redis

from .config import settings

redis_client: Optional[Redis] = (
    Redis.from_url(settings.redis_url, decode_responses=True, socket_timeout=2.0)
    if settings.redis_url
    else None
)
