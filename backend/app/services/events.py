"""
backend/app/services/events.py

Event emitter: pushes booking/resource events to a Redis queue for the
notification service.

Queue:
- events:p2p: booking notifications to a specific resident
- events:broadcast: resource announcements for all residents
"""

import json
import time
import logging

from .. import redis_client as redis_module

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"
BROADCAST_QUEUE = "events:broadcast"


def _push(queue: str, event_type: str, payload: dict) -> None:
    redis = redis_module.redis_client
    if redis is None:
        logger.debug(f"Redis disabled, event dropped: {event_type}")
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis.rpush(queue, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {queue}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def emit_event(event_type: str, payload: dict) -> None:
    """Emit a p2p event (instant delivery)."""
    _push(P2P_QUEUE, event_type, payload)


def emit_broadcast(event_type: str, payload: dict) -> None:
    """Emit a broadcast event (throttled delivery)."""
    _push(BROADCAST_QUEUE, event_type, payload)
