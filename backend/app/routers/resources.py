# backend/app/routers/resources.py
# Read: any caller. Create/update/delete/status: admin only. DELETE = hard delete (bookings cascade).

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..auth import Actor, get_actor, require_admin
from ..database import get_db
from ..models.generated import Resources as DBResources
from ..redis_client import redis_client
from ..schemas.resources import (
    ResourceCreate,
    ResourceRead,
    ResourceStatusUpdate,
    ResourceUpdate,
)
from ..schemas.slots import AvailableSlotsResponse
from ..services.errors import InvalidInput
from ..services.events import emit_broadcast
from ..services.slots import (
    LocalClock,
    SettingsRepository,
    get_clock,
    list_available_slots,
)

router = APIRouter(prefix="/resources", tags=["resources"])

STATUS_MESSAGES = {
    "out-of-service": 'Resource "{name}" is now out of service. Please choose another resource.',
    "available": 'Good news! Resource "{name}" is now available for booking.',
    "in-use": 'Resource "{name}" is currently in use.',
}


def _check_type(db: Session, resource_type: str) -> None:
    if not SettingsRepository(db).get().find_type(resource_type):
        raise InvalidInput(f"Unknown resource type: {resource_type}")


@router.get("/", response_model=list[ResourceRead])
def list_resources(
    type: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(DBResources)
    if type is not None:
        query = query.filter(DBResources.type == type)
    return query.order_by(DBResources.id).all()


@router.get("/{id}", response_model=ResourceRead)
def get_resource(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBResources, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Resource not found")
    return obj


@router.get("/{id}/available-slots", response_model=AvailableSlotsResponse)
def get_available_slots(
    id: int,
    date: Optional[str] = Query(None),
    _: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
    clock: LocalClock = Depends(get_clock),
):
    return list_available_slots(
        db,
        resource_id=id,
        target_date=date,
        settings_repo=SettingsRepository(db),
        clock=clock,
        redis=redis_client,
    )


@router.post("/", response_model=ResourceRead, status_code=status.HTTP_201_CREATED)
def create_resource(
    data: ResourceCreate,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _check_type(db, data.type)

    payload = data.model_dump(exclude_none=True)
    obj = DBResources(**payload)
    db.add(obj)
    db.commit()
    db.refresh(obj)

    emit_broadcast("resource_created", {
        "resource_id": obj.id,
        "message": (
            f'A new {obj.type.replace("_", " ")} resource "{obj.name}" has been added '
            f"at {obj.location}. Book it now!"
        ),
    })
    return obj


@router.patch("/{id}", response_model=ResourceRead)
def update_resource(
    id: int,
    data: ResourceUpdate,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    obj = db.get(DBResources, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Resource not found")

    changes = data.model_dump(exclude_unset=True)
    if "type" in changes:
        _check_type(db, changes["type"])

    for field, value in changes.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)

    emit_broadcast("resource_updated", {
        "resource_id": obj.id,
        "message": f'Resource "{obj.name}" has been updated. Check the latest details.',
    })
    return obj


@router.put("/status/{id}", response_model=ResourceRead)
def update_resource_status(
    id: int,
    data: ResourceStatusUpdate,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    obj = db.get(DBResources, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Resource not found")

    obj.status = data.status
    db.commit()
    db.refresh(obj)

    emit_broadcast("resource_status_changed", {
        "resource_id": obj.id,
        "status": obj.status,
        "message": STATUS_MESSAGES[obj.status].format(name=obj.name),
    })
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    id: int,
    _: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    obj = db.get(DBResources, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Resource not found")

    name, location = obj.name, obj.location
    db.delete(obj)
    db.commit()

    emit_broadcast("resource_deleted", {
        "resource_id": id,
        "message": f'The resource "{name}" at {location} has been removed from the system.',
    })
