# backend/app/routers/settings.py
# Read: any caller. Resource types, per-type slots and limits: admin only.

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Actor, get_actor, require_admin
from ..database import get_db
from ..redis_client import redis_client
from ..schemas.settings import (
    BookingLimits,
    BookingLimitsUpdate,
    ResourceTypeCreate,
    ResourceTypeDelete,
    ResourceTypeRead,
    SettingsRead,
    TypeSlotChange,
)
from ..services.slots import BookingPolicy, SettingsRepository
from ..services.slots import catalog

router = APIRouter(prefix="/settings", tags=["settings"])


def _to_read(policy: BookingPolicy) -> SettingsRead:
    return SettingsRead(
        resource_types=[ResourceTypeRead(**rt.to_dict()) for rt in policy.resource_types],
        booking_limits=BookingLimits(
            daily_limit=policy.daily_limit,
            weekly_limit=policy.weekly_limit,
            advance_booking_limit=policy.advance_booking_limit,
        ),
    )


@router.get("/", response_model=SettingsRead)
def get_settings(
    _: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return _to_read(SettingsRepository(db).get())


@router.post("/resource-types", response_model=SettingsRead)
def add_resource_type(
    data: ResourceTypeCreate,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    policy = catalog.add_resource_type(
        SettingsRepository(db), data.value, data.label, data.icon, redis=redis_client
    )
    return _to_read(policy)


@router.delete("/resource-types", response_model=SettingsRead)
def remove_resource_type(
    data: ResourceTypeDelete,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    policy = catalog.remove_resource_type(SettingsRepository(db), data.value, redis=redis_client)
    return _to_read(policy)


@router.post("/resource-types/time-slots", response_model=SettingsRead)
def add_time_slot_to_type(
    data: TypeSlotChange,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    policy = catalog.add_slot_to_type(
        SettingsRepository(db), data.resource_type, data.slot, redis=redis_client
    )
    return _to_read(policy)


@router.delete("/resource-types/time-slots", response_model=SettingsRead)
def remove_time_slot_from_type(
    data: TypeSlotChange,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    policy = catalog.remove_slot_from_type(
        SettingsRepository(db), data.resource_type, data.slot, redis=redis_client
    )
    return _to_read(policy)


@router.put("/booking-limits", response_model=SettingsRead)
def update_booking_limits(
    data: BookingLimitsUpdate,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    policy = catalog.update_booking_limits(SettingsRepository(db), **data.model_dump())
    return _to_read(policy)
