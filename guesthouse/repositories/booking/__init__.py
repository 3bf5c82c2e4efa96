from guesthouse.repositories.booking.room_assignment_repository import RoomAssignmentRepository
from guesthouse.repositories.booking.room_request_repository import RoomRequestRepository

__all__ = ["RoomAssignmentRepository", "RoomRequestRepository"]
