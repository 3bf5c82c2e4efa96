from guesthouse.services.room.room_category_service import RoomCategoryService
from guesthouse.services.room.room_service import RoomService

__all__ = ["RoomCategoryService", "RoomService"]
