from guesthouse.models.room.room import Room
from guesthouse.models.room.room_category import RoomCategory

__all__ = ["Room", "RoomCategory"]
