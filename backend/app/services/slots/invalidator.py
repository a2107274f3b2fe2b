# backend/app/services/slots/invalidator.py
"""
Cache invalidation for the slot catalog.

Triggers:
✓ Slot added to / removed from a type → invalidate that type
✓ Resource type added / removed → invalidate that type

Does NOT trigger:
✗ Booking created/cancelled (availability is calculated on-the-fly)
✗ Booking limits changed (limits are never cached)
"""

import logging

from redis import Redis

from .redis_store import CatalogRedisStore

logger = logging.getLogger(__name__)


def invalidate_catalog_cache(
    redis: Redis | None,
    resource_types: list[str] | None = None,
) -> int:
    """
    Invalidate cached catalogs.

    Args:
        redis: Redis client, or None when caching is disabled
        resource_types: Types to invalidate, or None for all

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0

    store = CatalogRedisStore(redis)
    deleted = store.delete_type_slots(resource_types)
    logger.info(f"Catalog cache invalidated: types={resource_types or 'all'} keys={deleted}")
    return deleted
