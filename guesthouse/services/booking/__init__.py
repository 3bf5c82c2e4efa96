from guesthouse.services.booking.room_assignment_service import RoomAssignmentService
from guesthouse.services.booking.room_request_service import RoomRequestService

__all__ = ["RoomAssignmentService", "RoomRequestService"]
