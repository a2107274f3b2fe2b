# backend/app/schemas/settings.py

from typing import Optional
from pydantic import BaseModel, Field


class ResourceTypeRead(BaseModel):
    value: str
    label: str
    icon: str
    time_slots: list[str]

    model_config = {"from_attributes": True}


class BookingLimits(BaseModel):
    daily_limit: int
    weekly_limit: int
    advance_booking_limit: int


class SettingsRead(BaseModel):
    resource_types: list[ResourceTypeRead]
    booking_limits: BookingLimits


class ResourceTypeCreate(BaseModel):
    value: str
    label: str
    icon: Optional[str] = None


class ResourceTypeDelete(BaseModel):
    value: str


class TypeSlotChange(BaseModel):
    resource_type: str
    slot: str


class BookingLimitsUpdate(BaseModel):
    daily_limit: Optional[int] = Field(None, ge=0)
    weekly_limit: Optional[int] = Field(None, ge=0)
    advance_booking_limit: Optional[int] = Field(None, ge=0)
