# backend/app/schemas/bookings.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class BookingCreate(BaseModel):
    # Optional so that missing fields are reported as InvalidInput by the service
    resource_id: Optional[int] = None
    date: Optional[str] = None
    slot: Optional[str] = None

    model_config = {"from_attributes": True}


class ResourceBrief(BaseModel):
    id: int
    name: str
    type: str
    location: str

    model_config = {"from_attributes": True}


class BookingRead(BaseModel):
    id: int

    user_id: str
    resource_id: int
    resource: Optional[ResourceBrief] = None

    date: str
    slot: str
    status: str

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingListItem(BookingRead):
    is_past: bool
