# backend/app/services/ledger.py
"""
Booking ledger: persistence adapter over the bookings/resources tables.

Related resources are joined explicitly here, so callers always get
fully-loaded ORM rows. The partial unique indexes on active rows are
the final arbiter for exclusivity; violations surface as SlotConflict.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..models.generated import Bookings as DBBookings
from ..models.generated import Resources as DBResources
from .errors import SlotConflict

logger = logging.getLogger(__name__)

ACTIVE = "active"
CANCELLED = "cancelled"


class BookingLedger:
    def __init__(self, db: Session):
        self.db = db

    # ── Resources ────────────────────────────────────────────────────────

    def get_resource(self, resource_id: int) -> Optional[DBResources]:
        return self.db.get(DBResources, resource_id)

    # ── Reads ────────────────────────────────────────────────────────────

    def get_booking(self, booking_id: int) -> Optional[DBBookings]:
        return (
            self.db.query(DBBookings)
            .options(joinedload(DBBookings.resource))
            .filter(DBBookings.id == booking_id)
            .first()
        )

    def find_active_user_slot(self, user_id: str, date: str, slot: str) -> Optional[DBBookings]:
        """Active booking of this user in the (date, slot) window, on any resource."""
        return (
            self.db.query(DBBookings)
            .filter(
                DBBookings.user_id == user_id,
                DBBookings.date == date,
                DBBookings.slot == slot,
                DBBookings.status == ACTIVE,
            )
            .first()
        )

    def count_user_active_for_type(
        self,
        user_id: str,
        resource_type: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        after: Optional[str] = None,
    ) -> int:
        """
        Count a user's active bookings on resources of one type.

        Args:
            date_from / date_to: inclusive date bounds
            after: exclusive lower bound (date > after)
        """
        query = (
            self.db.query(func.count(DBBookings.id))
            .join(DBResources, DBResources.id == DBBookings.resource_id)
            .filter(
                DBBookings.user_id == user_id,
                DBBookings.status == ACTIVE,
                DBResources.type == resource_type,
            )
        )
        if date_from is not None:
            query = query.filter(DBBookings.date >= date_from)
        if date_to is not None:
            query = query.filter(DBBookings.date <= date_to)
        if after is not None:
            query = query.filter(DBBookings.date > after)

        return query.scalar() or 0

    def active_slots(self, resource_id: int, date: str) -> set[str]:
        rows = (
            self.db.query(DBBookings.slot)
            .filter(
                DBBookings.resource_id == resource_id,
                DBBookings.date == date,
                DBBookings.status == ACTIVE,
            )
            .all()
        )
        return {slot for (slot,) in rows}

    def list_bookings(self, user_id: Optional[str] = None) -> list[DBBookings]:
        query = self.db.query(DBBookings).options(joinedload(DBBookings.resource))
        if user_id is not None:
            query = query.filter(DBBookings.user_id == user_id)
        return query.order_by(DBBookings.date.desc(), DBBookings.id.desc()).all()

    # ── Writes ───────────────────────────────────────────────────────────

    def create(self, user_id: str, resource_id: int, date: str, slot: str) -> DBBookings:
        obj = DBBookings(
            user_id=user_id,
            resource_id=resource_id,
            date=date,
            slot=slot,
            status=ACTIVE,
        )
        try:
            self.db.add(obj)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                f"Uniqueness violation on insert: user={user_id} resource={resource_id} "
                f"date={date} slot={slot}"
            )
            raise SlotConflict("This slot is already booked.") from None

        return self.get_booking(obj.id)

    def mark_cancelled(self, booking: DBBookings) -> DBBookings:
        booking.status = CANCELLED
        self.db.commit()
        self.db.refresh(booking)
        return booking
