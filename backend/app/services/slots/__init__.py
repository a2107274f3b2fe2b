# backend/app/services/slots/__init__.py
"""
Slots module.

Catalog: per-type slot lists (optionally cached in Redis Sorted Sets)
Availability: free slots for a resource/date (calculated on-the-fly)
"""

from .config import BookingPolicy, ResourceTypeConfig, SettingsRepository
from .clock import LocalClock, get_clock, week_end, week_start
from .catalog import get_slots_for_type
from .redis_store import CatalogRedisStore
from .invalidator import invalidate_catalog_cache
from .availability import list_available_slots

__all__ = [
    "BookingPolicy",
    "ResourceTypeConfig",
    "SettingsRepository",
    "LocalClock",
    "get_clock",
    "week_start",
    "week_end",
    "get_slots_for_type",
    "CatalogRedisStore",
    "invalidate_catalog_cache",
    "list_available_slots",
]
