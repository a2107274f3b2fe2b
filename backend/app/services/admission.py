# backend/app/services/admission.py
"""
Admission control for slot bookings.

book_slot() is the sole authority on whether a (resource, date, slot)
reservation is accepted. Checks run in a fixed order and the first
failure wins:

1. input present / date syntactically YYYY-MM-DD
2. resource exists (and is not out of service)
3. slot belongs to the current catalog of the resource type
4. slot has not started yet
5. advance-booking cap (future dates only)
6. one resource per (date, slot) per user
7. daily cap per type
8. weekly cap per type (Monday-Sunday)
9. insert; store uniqueness on active rows catches races

Steps 5-8 are best effort under concurrency; step 9 is not.
"""

import logging
import re
from datetime import datetime
from typing import Optional

from redis import Redis
from sqlalchemy.orm import Session

from ..models.generated import Bookings as DBBookings
from .errors import (
    AdvanceLimitExceeded,
    AlreadyCancelled,
    BookingNotFound,
    DailyLimitExceeded,
    Forbidden,
    InvalidInput,
    InvalidSlot,
    PastBooking,
    PastSlot,
    ResourceNotFound,
    ResourceUnavailable,
    SlotConflict,
    WeeklyLimitExceeded,
)
from .events import emit_event
from .ledger import CANCELLED, BookingLedger
from .slots.catalog import get_slots_for_type
from .slots.clock import DATE_FORMAT, LocalClock, week_end, week_start
from .slots.config import SettingsRepository

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

OUT_OF_SERVICE = "out-of-service"


def book_slot(
    db: Session,
    user_id: str,
    resource_id: Optional[int],
    date: Optional[str],
    slot: Optional[str],
    settings_repo: SettingsRepository,
    clock: LocalClock,
    redis: Redis | None = None,
) -> DBBookings:
    """
    Book `slot` on `resource_id` for `date` on behalf of `user_id`.

    Returns:
        The created booking (resource joined).

    Raises:
        BookingError subclass describing the first failed check.
    """
    ledger = BookingLedger(db)

    # Step 1: structural checks
    if not resource_id or not date or not slot:
        raise InvalidInput("resourceId, date and slot are required")
    if not DATE_RE.match(date):
        raise InvalidInput("date must be in YYYY-MM-DD format")
    try:
        datetime.strptime(date, DATE_FORMAT)
    except ValueError:
        raise InvalidInput(f"{date} is not a valid calendar date") from None

    # Step 2: resource
    resource = ledger.get_resource(resource_id)
    if not resource:
        raise ResourceNotFound()
    if resource.status == OUT_OF_SERVICE:
        raise ResourceUnavailable(
            f'Resource "{resource.name}" is out of service. Please choose another resource.'
        )

    # Step 3: catalog membership
    policy = settings_repo.get()
    valid_slots = get_slots_for_type(settings_repo, resource.type, redis=redis, policy=policy)
    if slot not in valid_slots:
        raise InvalidSlot(
            "Invalid slot for this resource type. Please refresh and select an available slot."
        )

    # Step 4: temporal validity
    if clock.is_past(date, slot):
        raise PastSlot("Cannot book slots in the past. Please select a current or future slot.")

    today = clock.today()

    # Step 5: advance-booking cap
    if date > today:
        early = ledger.count_user_active_for_type(user_id, resource.type, after=today)
        if early >= policy.advance_booking_limit:
            raise AdvanceLimitExceeded(
                f"You already have {early} advance {resource.type} booking(s). "
                f"Maximum {policy.advance_booking_limit} early booking(s) per resource type."
            )

    # Step 6: one resource per time window
    if ledger.find_active_user_slot(user_id, date, slot):
        raise SlotConflict(
            "You already have a booking in this time slot. Only 1 resource per time slot is allowed."
        )

    # Step 7: daily cap
    daily = ledger.count_user_active_for_type(
        user_id, resource.type, date_from=date, date_to=date
    )
    if daily >= policy.daily_limit:
        raise DailyLimitExceeded(
            f"You already have {daily} {resource.type} bookings for this day. "
            f"Max {policy.daily_limit} per day allowed."
        )

    # Step 8: weekly cap
    weekly = ledger.count_user_active_for_type(
        user_id, resource.type, date_from=week_start(date), date_to=week_end(date)
    )
    if weekly >= policy.weekly_limit:
        raise WeeklyLimitExceeded(
            f"Reached weekly limit for {resource.type}. "
            f"Max {policy.weekly_limit} per week allowed."
        )

    # Step 9: commit; the store decides races
    booking = ledger.create(user_id, resource.id, date, slot)
    logger.info(
        f"Booking {booking.id} created: user={user_id} resource={resource.id} "
        f"date={date} slot={slot}"
    )

    emit_event("booking_created", {
        "booking_id": booking.id,
        "user_id": user_id,
        "resource_id": resource.id,
        "resource_name": resource.name,
        "date": date,
        "slot": slot,
    })
    return booking


def cancel_booking(
    db: Session,
    booking_id: int,
    acting_user: str,
    clock: LocalClock,
    as_admin: bool = False,
) -> DBBookings:
    """
    Cancel an active booking.

    Residents may only cancel their own bookings; admins skip the
    ownership check. Cancelling twice is an error, not a no-op.
    """
    ledger = BookingLedger(db)

    booking = ledger.get_booking(booking_id)
    if not booking:
        raise BookingNotFound()

    if not as_admin and booking.user_id != acting_user:
        raise Forbidden()

    if booking.status == CANCELLED:
        raise AlreadyCancelled()

    if clock.is_past(booking.date, booking.slot):
        raise PastBooking("Cannot cancel past bookings")

    booking = ledger.mark_cancelled(booking)
    logger.info(
        f"Booking {booking.id} cancelled by {'admin ' if as_admin else ''}{acting_user}"
    )

    emit_event("booking_cancelled", {
        "booking_id": booking.id,
        "user_id": booking.user_id,
        "resource_id": booking.resource_id,
        "date": booking.date,
        "slot": booking.slot,
        "by_admin": as_admin,
    })
    return booking


def list_bookings(
    db: Session,
    clock: LocalClock,
    user_id: Optional[str] = None,
) -> list[tuple[DBBookings, bool]]:
    """Bookings (newest date first), each paired with its is_past flag."""
    ledger = BookingLedger(db)
    return [
        (booking, clock.is_past(booking.date, booking.slot))
        for booking in ledger.list_bookings(user_id)
    ]
