"""
Database models.
"""

from guesthouse.models.booking import RoomAssignment, RoomRequest
from guesthouse.models.mess import FoodPass, FoodPassCategory
from guesthouse.models.room import Room, RoomCategory

__all__ = [
    "FoodPass",
    "FoodPassCategory",
    "Room",
    "RoomAssignment",
    "RoomCategory",
    "RoomRequest",
]
