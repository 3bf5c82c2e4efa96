"""
Room category schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from guesthouse.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "RoomImage",
    "RoomCategoryCreate",
    "RoomCategoryUpdate",
    "RoomCategoryResponse",
]


class RoomImage(BaseSchema):
    url: str = Field(..., min_length=1, max_length=2048)
    description: str = Field(default="", max_length=500)
    uploaded_at: Optional[datetime] = None


class RoomCategoryCreate(BaseCreateSchema):
    room_name: str = Field(..., min_length=1, max_length=100)
    price: str = Field(default="", max_length=50, description="Display price label")
    images: List[RoomImage] = Field(default_factory=list)


class RoomCategoryUpdate(BaseUpdateSchema):
    room_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[str] = Field(default=None, max_length=50)
    images: Optional[List[RoomImage]] = None

    @field_validator("room_name", "price", "images")
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class RoomCategoryResponse(BaseResponseSchema):
    room_name: str
    price: str
    images: List[RoomImage]
