"""
Data access layer.
"""

from guesthouse.repositories.booking import RoomAssignmentRepository, RoomRequestRepository
from guesthouse.repositories.mess import FoodPassCategoryRepository, FoodPassRepository
from guesthouse.repositories.room import RoomCategoryRepository, RoomRepository

__all__ = [
    "FoodPassCategoryRepository",
    "FoodPassRepository",
    "RoomAssignmentRepository",
    "RoomCategoryRepository",
    "RoomRepository",
    "RoomRequestRepository",
]
