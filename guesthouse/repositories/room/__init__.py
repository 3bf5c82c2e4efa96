from guesthouse.repositories.room.room_category_repository import RoomCategoryRepository
from guesthouse.repositories.room.room_repository import RoomRepository

__all__ = ["RoomCategoryRepository", "RoomRepository"]
