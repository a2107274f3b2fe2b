# backend/app/services/slots/availability.py
"""
Free-slot list for one resource on one date.

Advisory only: the admission controller re-checks everything, so a stale
answer here can cause a rejected request but never a double booking.

Takes into account:
- Slot catalog of the resource type
- Active bookings on the resource for the date
- Current local time (slots that already started are dropped)
"""

import re

from redis import Redis
from sqlalchemy.orm import Session

from ..errors import InvalidInput, ResourceNotFound
from ..ledger import BookingLedger
from .catalog import get_slots_for_type
from .clock import LocalClock, slot_start_minutes
from .config import SettingsRepository

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def list_available_slots(
    db: Session,
    resource_id: int,
    target_date: str,
    settings_repo: SettingsRepository,
    clock: LocalClock,
    redis: Redis | None = None,
) -> dict:
    """
    Calculate free slots for a resource.

    Returns:
        Dict with available slots in catalog order (for AvailableSlotsResponse).
    """
    if not target_date or not DATE_RE.match(target_date):
        raise InvalidInput("Please provide date as query param, e.g. ?date=2025-01-02")

    ledger = BookingLedger(db)

    # Step 1: Resource
    resource = ledger.get_resource(resource_id)
    if not resource:
        raise ResourceNotFound()

    # Step 2: Catalog for the type
    all_slots = get_slots_for_type(settings_repo, resource.type, redis=redis)

    # Step 3: Subtract active bookings
    booked = ledger.active_slots(resource.id, target_date)
    candidates = [slot for slot in all_slots if slot not in booked]

    # Step 4: Temporal filter
    today = clock.today()
    if target_date > today:
        available = candidates
    elif target_date < today:
        available = []
    else:
        now_min = clock.minutes_now()
        available = [slot for slot in candidates if slot_start_minutes(slot) > now_min]

    return {
        "date": target_date,
        "resource_id": resource.id,
        "resource_type": resource.type,
        "available_slots": available,
    }
