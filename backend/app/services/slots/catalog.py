# backend/app/services/slots/catalog.py
"""
Slot catalog: which "HH:MM-HH:MM" slots exist for each resource type.

Reads go through an optional Redis cache (see redis_store.py); every
mutation rewrites the policy row and invalidates the affected type.
"""

import logging
import re
from dataclasses import replace

from redis import Redis
from redis.exceptions import RedisError

from ..errors import CatalogError, ResourceTypeNotFound
from .clock import parse_slot
from .config import (
    FALLBACK_SLOTS,
    SLOT_RE,
    BookingPolicy,
    ResourceTypeConfig,
    SettingsRepository,
)
from .invalidator import invalidate_catalog_cache
from .redis_store import CatalogRedisStore

logger = logging.getLogger(__name__)


def get_slots_for_type(
    repo: SettingsRepository,
    resource_type: str,
    redis: Redis | None = None,
    policy: BookingPolicy | None = None,
) -> list[str]:
    """
    Ordered catalog for a resource type.

    Never empty: a type without configured slots gets the fallback schedule.
    """
    store = CatalogRedisStore(redis) if redis is not None else None
    if store is not None:
        try:
            cached = store.get_type_slots(resource_type)
        except RedisError as e:
            logger.warning(f"Catalog cache read failed for {resource_type}: {e}")
            cached = None
            store = None
        if cached is not None:
            return cached or list(FALLBACK_SLOTS)

    policy = policy or repo.get()
    rt = policy.find_type(resource_type)
    configured = list(rt.time_slots) if rt else []

    if store is not None:
        try:
            store.store_type_slots(
                resource_type,
                [(slot, parse_slot(slot)[0]) for slot in configured],
            )
        except RedisError as e:
            logger.warning(f"Catalog cache write failed for {resource_type}: {e}")

    if not configured:
        logger.info(f"No time slots configured for {resource_type}, using fallback")
    return list(policy.slots_for_type(resource_type))


def validate_slot_format(slot: str) -> tuple[int, int]:
    """Parse a catalog slot, rejecting bad format and empty/inverted ranges."""
    if not slot or not SLOT_RE.match(slot):
        raise CatalogError("Invalid slot format. Use HH:MM-HH:MM")
    start, end = parse_slot(slot)
    if start >= end:
        raise CatalogError("Slot start must be before its end")
    return start, end


def _overlaps(a: tuple[int, int], b: tuple[int, int]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def add_slot_to_type(
    repo: SettingsRepository,
    resource_type: str,
    slot: str,
    redis: Redis | None = None,
) -> BookingPolicy:
    new_range = validate_slot_format(slot)

    policy = repo.get()
    rt = policy.find_type(resource_type)
    if rt is None:
        raise ResourceTypeNotFound(f"Resource type not found: {resource_type}")

    if slot in rt.time_slots:
        raise CatalogError("Time slot already exists for this resource type")

    for existing in rt.time_slots:
        if _overlaps(new_range, parse_slot(existing)):
            raise CatalogError(f"Time slot conflicts with existing slot: {existing}")

    slots = tuple(sorted(rt.time_slots + (slot,), key=lambda s: parse_slot(s)[0]))
    policy = repo.update(policy.with_type(replace(rt, time_slots=slots)))
    invalidate_catalog_cache(redis, [resource_type])

    logger.info(f"Time slot {slot} added to {resource_type}")
    return policy


def remove_slot_from_type(
    repo: SettingsRepository,
    resource_type: str,
    slot: str,
    redis: Redis | None = None,
) -> BookingPolicy:
    """Existing bookings on the removed slot stay valid."""
    policy = repo.get()
    rt = policy.find_type(resource_type)
    if rt is None:
        raise ResourceTypeNotFound(f"Resource type not found: {resource_type}")

    slots = tuple(s for s in rt.time_slots if s != slot)
    policy = repo.update(policy.with_type(replace(rt, time_slots=slots)))
    invalidate_catalog_cache(redis, [resource_type])

    logger.info(f"Time slot {slot} removed from {resource_type}")
    return policy


def normalize_type_value(value: str) -> str:
    return re.sub(r"\s+", "_", value.strip().lower())


def add_resource_type(
    repo: SettingsRepository,
    value: str,
    label: str,
    icon: str | None = None,
    redis: Redis | None = None,
) -> BookingPolicy:
    if not value or not value.strip() or not label:
        raise CatalogError("value and label are required")

    value = normalize_type_value(value)
    policy = repo.get()
    if policy.find_type(value):
        raise CatalogError("Resource type already exists")

    new_type = ResourceTypeConfig(value=value, label=label, icon=icon or "grid")
    policy = repo.update(replace(policy, resource_types=policy.resource_types + (new_type,)))
    invalidate_catalog_cache(redis, [value])

    logger.info(f"Resource type {value} added")
    return policy


def remove_resource_type(
    repo: SettingsRepository,
    value: str,
    redis: Redis | None = None,
) -> BookingPolicy:
    policy = repo.get()
    types = tuple(rt for rt in policy.resource_types if rt.value != value)
    policy = repo.update(replace(policy, resource_types=types))
    invalidate_catalog_cache(redis, [value])

    logger.info(f"Resource type {value} removed")
    return policy


def update_booking_limits(
    repo: SettingsRepository,
    daily_limit: int | None = None,
    weekly_limit: int | None = None,
    advance_booking_limit: int | None = None,
) -> BookingPolicy:
    policy = repo.get()
    changes = {
        name: value
        for name, value in (
            ("daily_limit", daily_limit),
            ("weekly_limit", weekly_limit),
            ("advance_booking_limit", advance_booking_limit),
        )
        if value is not None
    }
    try:
        updated = replace(policy, **changes)
    except ValueError as e:
        raise CatalogError(str(e)) from None

    policy = repo.update(updated)
    logger.info(f"Booking limits updated: {changes}")
    return policy
