"""
Database enums shared by models and schemas.
"""

import enum


class UserRole(str, enum.Enum):
    """Caller role as asserted by the identity provider."""
    SUPER_ADMIN = "SUPER_ADMIN"
    STAFF = "STAFF"
    USER = "USER"

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.SUPER_ADMIN, UserRole.STAFF)


class RoomType(str, enum.Enum):
    """Room tier, named after the residential blocks."""
    SHREEHARIPLUS = "SHREEHARIPLUS"
    SHREEHARI = "SHREEHARI"
    SARJUPLUS = "SARJUPLUS"
    SARJU = "SARJU"
    NEELKANTHPLUS = "NEELKANTHPLUS"
    NEELKANTH = "NEELKANTH"


class BedType(str, enum.Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    EXTRA_BED = "EXTRA_BED"


class RequestStatus(str, enum.Enum):
    """Stay request status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AssignmentState(str, enum.Enum):
    """Room assignment lifecycle, derived from the check-in/out flags."""
    CREATED = "CREATED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class MealType(str, enum.Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
