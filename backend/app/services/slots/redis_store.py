# backend/app/services/slots/redis_store.py
"""
Redis storage for the slot catalog using Sorted Sets.

Key format: slots:catalog:{resource_type}
Value: Sorted Set where member = "HH:MM-HH:MM", score = start minute.

Query: ZRANGE key 0 -1 → catalog in ascending start order.
Sentinel: "__empty__" with score=-1 marks "type has no configured slots".
"""

from redis import Redis


EMPTY_SENTINEL = "__empty__"


class CatalogRedisStore:
    """Redis storage wrapper using Sorted Sets for per-type catalogs."""

    KEY_PREFIX = "slots:catalog"

    def __init__(self, redis: Redis, ttl_seconds: int = 86400):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, resource_type: str) -> str:
        return f"{self.KEY_PREFIX}:{resource_type}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_type_slots(
        self,
        resource_type: str,
        slots: list[tuple[str, int]],
    ) -> None:
        """
        Store the catalog of one resource type.

        Args:
            resource_type: Resource type value
            slots: List of (slot_str, start_minute) pairs.
                   Empty list → sentinel is stored.
        """
        key = self._key(resource_type)
        pipe = self.redis.pipeline()

        pipe.delete(key)

        if slots:
            pipe.zadd(key, {slot: start for slot, start in slots})
        else:
            pipe.zadd(key, {EMPTY_SENTINEL: -1})
        pipe.expire(key, self.ttl_seconds)

        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_type_slots(self, resource_type: str) -> list[str] | None:
        """
        Single ZRANGE read: a stored key always has at least the sentinel,
        so no members means the key is gone (expired or invalidated).

        Returns:
            Ordered list of slot strings, or None on cache miss.
        """
        members = self.redis.zrange(self._key(resource_type), 0, -1)
        if not members:
            return None

        slots = [m.decode() if isinstance(m, bytes) else m for m in members]
        return [s for s in slots if s != EMPTY_SENTINEL]

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_type_slots(self, resource_types: list[str] | None = None) -> int:
        """
        Delete cached catalogs.

        Args:
            resource_types: Specific types, or None to delete all.

        Returns:
            Number of deleted keys.
        """
        if resource_types:
            keys = [self._key(rt) for rt in resource_types]
        else:
            keys = self.redis.keys(f"{self.KEY_PREFIX}:*")

        if not keys:
            return 0

        return self.redis.delete(*keys)
