# backend/app/routers/bookings.py
# Residents book/cancel their own slots; admins see and cancel everything.

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import Actor, get_actor, require_admin
from ..database import get_db
from ..redis_client import redis_client
from ..schemas.bookings import (
    BookingCreate,
    BookingListItem,
    BookingRead,
)
from ..services import admission
from ..services.slots import LocalClock, SettingsRepository, get_clock

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _with_status(rows) -> list[BookingListItem]:
    return [
        BookingListItem(**BookingRead.model_validate(booking).model_dump(), is_past=is_past)
        for booking, is_past in rows
    ]


@router.post("/slot", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def book_slot(
    data: BookingCreate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    clock: LocalClock = Depends(get_clock),
):
    return admission.book_slot(
        db,
        user_id=actor.user_id,
        resource_id=data.resource_id,
        date=data.date,
        slot=data.slot,
        settings_repo=SettingsRepository(db),
        clock=clock,
        redis=redis_client,
    )


@router.get("/my", response_model=list[BookingListItem])
def list_my_bookings(
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    clock: LocalClock = Depends(get_clock),
):
    return _with_status(admission.list_bookings(db, clock, user_id=actor.user_id))


@router.get("/", response_model=list[BookingListItem])
def list_all_bookings(
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
    clock: LocalClock = Depends(get_clock),
):
    return _with_status(admission.list_bookings(db, clock))


@router.put("/cancel/{id}", response_model=BookingRead)
def cancel_booking(
    id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    clock: LocalClock = Depends(get_clock),
):
    return admission.cancel_booking(db, id, actor.user_id, clock)


@router.put("/admin/cancel/{id}", response_model=BookingRead)
def admin_cancel_booking(
    id: int,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
    clock: LocalClock = Depends(get_clock),
):
    return admission.cancel_booking(db, id, actor.user_id, clock, as_admin=True)
