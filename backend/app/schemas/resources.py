# backend/app/schemas/resources.py

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

ResourceStatus = Literal["available", "in-use", "out-of-service"]


class ResourceCreate(BaseModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    location: str = Field(min_length=1)
    picture: Optional[str] = None

    model_config = {"from_attributes": True}


class ResourceUpdate(BaseModel):
    # Omitted fields stay unchanged; explicit nulls are rejected
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    picture: Optional[str] = None
    status: Optional[ResourceStatus] = None

    @field_validator("name", "type", "location", "picture", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    model_config = {"from_attributes": True}


class ResourceStatusUpdate(BaseModel):
    status: ResourceStatus


class ResourceRead(BaseModel):
    id: int
    name: str
    type: str
    status: str
    location: str
    picture: str

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
