"""
Pydantic schemas for resource registry request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from app.models.resource import ResourceStatus


class ResourceCreate(BaseModel):
    kind: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    subcategory: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=255)
    quantity: int = Field(default=1, ge=0)
    status: ResourceStatus = ResourceStatus.AVAILABLE

    @field_validator("kind")
    @classmethod
    def upper_kind(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("kind must not be blank")
        return v


class ResourceUpdate(BaseModel):
    """Only these fields may change; anything else in the body is ignored."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    subcategory: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, max_length=255)
    quantity: Optional[int] = Field(None, ge=0)
    status: Optional[ResourceStatus] = None


class ResourceResponse(BaseModel):
    id: int
    kind: str
    name: str
    subcategory: Optional[str]
    type: Optional[str]
    quantity: int
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
