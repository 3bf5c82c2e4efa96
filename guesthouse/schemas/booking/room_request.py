"""
Stay request schemas.

The headcount ``total`` sent by a client is accepted and discarded; the
server always stores male + female + children.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from guesthouse.models.base.enums import RequestStatus
from guesthouse.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    IdStr,
)

__all__ = [
    "Headcount",
    "RoomRequestCreate",
    "RoomRequestUpdate",
    "RoomRequestAdminUpdate",
    "RoomRequestProcess",
    "RoomRequestResponse",
]


class Headcount(BaseSchema):
    """Party composition of a stay."""

    male: int = Field(default=0, ge=0, le=500)
    female: int = Field(default=0, ge=0, le=500)
    children: int = Field(default=0, ge=0, le=500)
    total: int = Field(default=0, description="Ignored on input; always recomputed")

    @model_validator(mode="after")
    def recompute_total(self) -> "Headcount":
        self.total = self.male + self.female + self.children
        return self


class RoomRequestCreate(BaseCreateSchema):
    """
    Schema for submitting a stay request.
    """

    check_in_date: datetime
    check_out_date: datetime
    number_of_people: Headcount
    place: str = Field(..., min_length=1, max_length=200)
    purpose: str = Field(..., min_length=1, max_length=2000)
    form_name: str = Field(default="", max_length=200)
    special_requests: str = Field(default="", max_length=2000)
    reference: str = Field(default="", max_length=200)

    @model_validator(mode="after")
    def validate_stay(self) -> "RoomRequestCreate":
        if self.check_out_date < self.check_in_date:
            raise ValueError("check_out_date must not be before check_in_date")
        if self.number_of_people.total <= 0:
            raise ValueError("number_of_people must include at least one person")
        return self


class RoomRequestUpdate(BaseUpdateSchema):
    """Owner edit of a pending request."""

    check_in_date: Optional[datetime] = None
    check_out_date: Optional[datetime] = None
    number_of_people: Optional[Headcount] = None
    place: Optional[str] = Field(default=None, min_length=1, max_length=200)
    purpose: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    form_name: Optional[str] = Field(default=None, max_length=200)
    special_requests: Optional[str] = Field(default=None, max_length=2000)
    reference: Optional[str] = Field(default=None, max_length=200)

    @field_validator("check_in_date", "check_out_date", "number_of_people", "place", "purpose")
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @model_validator(mode="after")
    def validate_headcount(self):
        if self.number_of_people is not None and self.number_of_people.total <= 0:
            raise ValueError("number_of_people must include at least one person")
        return self

    def changes(self) -> Dict[str, Any]:
        """Flatten the headcount into column values."""
        data = super().changes()
        headcount = data.pop("number_of_people", None)
        if headcount is not None:
            data["male"] = headcount["male"]
            data["female"] = headcount["female"]
            data["children"] = headcount["children"]
            data["total"] = headcount["male"] + headcount["female"] + headcount["children"]
        return data


class RoomRequestAdminUpdate(RoomRequestUpdate):
    """Staff edit; may also correct the guest's display name."""

    name: Optional[str] = Field(default=None, max_length=200)


class RoomRequestProcess(BaseSchema):
    """
    Staff decision on a pending request.

    When approving with a room, the assignment is created in the same
    transaction as the status change.
    """

    status: RequestStatus
    room_id: Optional[IdStr] = None
    guest_names: Optional[List[str]] = Field(default=None, max_length=50)
    dining_hall_preference: str = Field(default="", max_length=100)

    @field_validator("guest_names")
    @classmethod
    def normalize_names(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("status")
    @classmethod
    def validate_decision(cls, v: RequestStatus) -> RequestStatus:
        if v == RequestStatus.PENDING:
            raise ValueError("status must be APPROVED or REJECTED")
        return v

    @model_validator(mode="after")
    def validate_room(self) -> "RoomRequestProcess":
        if self.room_id is not None and self.status != RequestStatus.APPROVED:
            raise ValueError("room_id is only allowed when approving")
        return self


class RoomRequestResponse(BaseResponseSchema):
    public_id: str
    user_id: str
    name: str
    form_name: str
    place: str
    purpose: str
    special_requests: str
    reference: str
    check_in_date: datetime
    check_out_date: datetime
    number_of_people: Headcount
    status: RequestStatus
    processed_by: Optional[str] = None
    processed_at: Optional[datetime] = None

    # Best-effort enrichment
    user: Optional[Dict[str, Any]] = None
    assignment: Optional[Dict[str, Any]] = None
    room: Optional[Dict[str, Any]] = None

    @classmethod
    def from_model(
        cls,
        request: Any,
        user: Optional[Dict[str, Any]] = None,
        assignment: Optional[Dict[str, Any]] = None,
        room: Optional[Dict[str, Any]] = None,
    ) -> "RoomRequestResponse":
        """Build a response from the flat RoomRequest columns."""
        return cls(
            id=request.id,
            created_at=request.created_at,
            updated_at=request.updated_at,
            public_id=request.public_id,
            user_id=request.user_id,
            name=request.name,
            form_name=request.form_name,
            place=request.place,
            purpose=request.purpose,
            special_requests=request.special_requests,
            reference=request.reference,
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
            number_of_people=Headcount(
                male=request.male,
                female=request.female,
                children=request.children,
            ),
            status=request.status,
            processed_by=request.processed_by,
            processed_at=request.processed_at,
            user=user,
            assignment=assignment,
            room=room,
        )
