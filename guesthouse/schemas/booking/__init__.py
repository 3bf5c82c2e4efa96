from guesthouse.schemas.booking.room_assignment import (
    CheckInResult,
    CheckOutResult,
    PassIssuanceResult,
    RoomAssignmentCreate,
    RoomAssignmentResponse,
)
from guesthouse.schemas.booking.room_request import (
    Headcount,
    RoomRequestAdminUpdate,
    RoomRequestCreate,
    RoomRequestProcess,
    RoomRequestResponse,
    RoomRequestUpdate,
)

__all__ = [
    "CheckInResult",
    "CheckOutResult",
    "Headcount",
    "PassIssuanceResult",
    "RoomAssignmentCreate",
    "RoomAssignmentResponse",
    "RoomRequestAdminUpdate",
    "RoomRequestCreate",
    "RoomRequestProcess",
    "RoomRequestResponse",
    "RoomRequestUpdate",
]
