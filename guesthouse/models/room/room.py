"""
Room model.

A room is a singly-held resource identified by (room_number, building).
``is_occupied`` is written only by the assignment workflow.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from guesthouse.db.base import BaseModel, TimestampMixin
from guesthouse.models.base.enums import RoomType

__all__ = ["Room"]


class Room(BaseModel, TimestampMixin):
    """
    Physical room with bed composition, amenities and occupancy flag.

    Attributes:
        room_number: Door number, unique within a building
        building: Building name
        floor: Floor number
        room_type: Room tier
        beds: Ordered list of {"type", "quantity"} entries
        is_visible: Hidden rooms are excluded from guest-facing listings
        is_occupied: True while an assignment on the room is not checked out
    """

    __tablename__ = "rooms"

    room_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    building: Mapped[str] = mapped_column(String(100), nullable=False, default="", index=True)
    floor: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    room_type: Mapped[RoomType] = mapped_column(
        SAEnum(RoomType, name="room_type", native_enum=False, length=20),
        nullable=False,
        index=True,
    )
    beds: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Amenities
    has_geyser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_ac: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_sofa_set: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sofa_set_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    extra_amenities: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Status flags
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_occupied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    needs_cleaning: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    room_category_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("room_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("room_number", "building", name="uq_rooms_number_building"),
        Index("ix_rooms_building_floor", "building", "floor"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, number={self.room_number}, building={self.building})>"
