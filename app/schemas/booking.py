"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BookingCreate(BaseModel):
    kind: str = Field(..., min_length=1, max_length=50)
    resource_id: int = Field(..., gt=0)
    resource_name: str = Field(..., min_length=1, max_length=255)
    start_dt: datetime
    end_dt: datetime
    quantity: Optional[int] = Field(None, ge=0)
    requester_name: Optional[str] = Field(None, max_length=255)
    requester_role: Optional[str] = Field(None, max_length=100)
    purpose: Optional[str] = Field(None, max_length=1000)

    @field_validator("kind")
    @classmethod
    def upper_kind(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("kind must not be blank")
        return v


class BookingResponse(BaseModel):
    id: int
    kind: str
    resource_id: int
    resource_name: str
    start_dt: datetime
    end_dt: datetime
    quantity: Optional[int]
    status: str
    requester_name: Optional[str]
    requester_role: Optional[str]
    purpose: Optional[str]
    started_at: Optional[datetime]
    ended_at: Optional[datetime]
    canceled_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
