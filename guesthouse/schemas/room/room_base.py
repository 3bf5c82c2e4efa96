"""
Room schemas for create and patch payloads.

``is_occupied`` is deliberately absent: occupancy is written only by the
assignment workflow.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from guesthouse.models.base.enums import BedType, RoomType
from guesthouse.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema, IdStr

__all__ = [
    "Bed",
    "RoomCreate",
    "RoomUpdate",
]


class Bed(BaseSchema):
    """One bed-composition entry."""

    type: BedType = Field(..., description="Bed type")
    quantity: int = Field(..., ge=1, le=20, description="Number of beds of this type")


class RoomCreate(BaseCreateSchema):
    """
    Schema for creating a room.
    """

    room_number: str = Field(..., min_length=1, max_length=50, examples=["12A", "101"])
    building: str = Field(default="", max_length=100)
    floor: int = Field(..., ge=0, le=200)
    room_type: RoomType = Field(..., description="Room tier")
    beds: List[Bed] = Field(..., min_length=1, description="Ordered bed composition")

    has_geyser: bool = False
    has_ac: bool = False
    has_sofa_set: bool = False
    sofa_set_quantity: int = Field(default=0, ge=0, le=20)
    extra_amenities: str = Field(default="", max_length=1000)

    is_visible: bool = True
    room_category_id: Optional[IdStr] = None

    @model_validator(mode="after")
    def validate_sofa_set(self) -> "RoomCreate":
        if not self.has_sofa_set:
            self.sofa_set_quantity = 0
        return self


class RoomUpdate(BaseUpdateSchema):
    """
    Patch schema for rooms. Only fields listed here can change.
    """

    room_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    building: Optional[str] = Field(default=None, max_length=100)
    floor: Optional[int] = Field(default=None, ge=0, le=200)
    room_type: Optional[RoomType] = None
    beds: Optional[List[Bed]] = Field(default=None, min_length=1)

    has_geyser: Optional[bool] = None
    has_ac: Optional[bool] = None
    has_sofa_set: Optional[bool] = None
    sofa_set_quantity: Optional[int] = Field(default=None, ge=0, le=20)
    extra_amenities: Optional[str] = Field(default=None, max_length=1000)

    is_visible: Optional[bool] = None
    needs_cleaning: Optional[bool] = None
    room_category_id: Optional[IdStr] = None

    @field_validator(
        "room_number", "floor", "room_type", "beds",
        "has_geyser", "has_ac", "has_sofa_set", "is_visible", "needs_cleaning",
    )
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v
