"""
Room response schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from guesthouse.models.base.enums import RoomType
from guesthouse.schemas.common.base import BaseResponseSchema, BaseSchema
from guesthouse.schemas.room.room_base import Bed

__all__ = [
    "RoomResponse",
    "RoomStats",
]


class RoomResponse(BaseResponseSchema):
    room_number: str
    building: str
    floor: int
    room_type: RoomType
    beds: List[Bed]
    has_geyser: bool
    has_ac: bool
    has_sofa_set: bool
    sofa_set_quantity: int
    extra_amenities: str
    is_visible: bool
    is_occupied: bool
    needs_cleaning: bool
    room_category_id: Optional[str] = None


class RoomStats(BaseSchema):
    """Occupancy counts computed at read time."""

    total: int = Field(..., ge=0)
    occupied: int = Field(..., ge=0)
    available: int = Field(..., ge=0)
