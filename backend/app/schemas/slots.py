# backend/app/schemas/slots.py
"""
Pydantic schemas for slot availability.
"""

from pydantic import BaseModel, Field


class AvailableSlotsResponse(BaseModel):
    """Free slots of one resource on one date."""
    date: str
    resource_id: int
    resource_type: str
    available_slots: list[str] = Field(description='Slots "HH:MM-HH:MM" in ascending start order')

    model_config = {"from_attributes": True}
