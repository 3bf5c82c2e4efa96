from guesthouse.models.base.enums import (
    AssignmentState,
    BedType,
    MealType,
    RequestStatus,
    RoomType,
    UserRole,
)

__all__ = [
    "AssignmentState",
    "BedType",
    "MealType",
    "RequestStatus",
    "RoomType",
    "UserRole",
]
