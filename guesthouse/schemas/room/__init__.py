from guesthouse.schemas.room.room_base import Bed, RoomCreate, RoomUpdate
from guesthouse.schemas.room.room_category import (
    RoomCategoryCreate,
    RoomCategoryResponse,
    RoomCategoryUpdate,
    RoomImage,
)
from guesthouse.schemas.room.room_response import RoomResponse, RoomStats

__all__ = [
    "Bed",
    "RoomCategoryCreate",
    "RoomCategoryResponse",
    "RoomCategoryUpdate",
    "RoomCreate",
    "RoomImage",
    "RoomResponse",
    "RoomStats",
    "RoomUpdate",
]
