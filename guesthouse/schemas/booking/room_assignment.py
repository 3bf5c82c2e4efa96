"""
Room assignment schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from guesthouse.models.base.enums import AssignmentState
from guesthouse.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema, IdStr

__all__ = [
    "RoomAssignmentCreate",
    "RoomAssignmentResponse",
    "CheckInResult",
    "CheckOutResult",
    "PassIssuanceResult",
]


def _clean_names(names: Optional[List[str]]) -> Optional[List[str]]:
    if names is None:
        return None
    return [name.strip() for name in names if name and name.strip()]


class RoomAssignmentCreate(BaseCreateSchema):
    """
    Direct room assignment by staff.

    ``guest_names`` defaults to a single placeholder guest when omitted.
    """

    room_id: IdStr
    user_id: IdStr
    request_id: Optional[IdStr] = None
    check_in_date: datetime
    check_out_date: datetime
    guest_names: Optional[List[str]] = Field(default=None, max_length=50)
    dining_hall_preference: str = Field(default="", max_length=100)

    @field_validator("guest_names")
    @classmethod
    def normalize_names(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_names(v)

    @model_validator(mode="after")
    def validate_dates(self) -> "RoomAssignmentCreate":
        if self.check_out_date < self.check_in_date:
            raise ValueError("check_out_date must not be before check_in_date")
        return self


class RoomAssignmentResponse(BaseResponseSchema):
    room_id: str
    user_id: str
    request_id: Optional[str] = None
    guest_names: List[str]
    dining_hall_preference: str
    check_in_date: datetime
    check_out_date: datetime
    assigned_by: str
    assigned_at: datetime
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    checked_out: bool
    checked_out_at: Optional[datetime] = None
    state: AssignmentState


class CheckInResult(BaseSchema):
    assignment: RoomAssignmentResponse
    passes_issued: int = 0


class CheckOutResult(BaseSchema):
    assignment: RoomAssignmentResponse
    passes_revoked: int = 0
    room_released: bool = False


class PassIssuanceResult(BaseSchema):
    assignment_id: str
    passes_issued: int
