from guesthouse.models.booking.room_assignment import RoomAssignment
from guesthouse.models.booking.room_request import RoomRequest

__all__ = ["RoomAssignment", "RoomRequest"]
