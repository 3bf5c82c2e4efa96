"""
Meal pass schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from guesthouse.models.base.enums import MealType
from guesthouse.schemas.common.base import (
    HEX_COLOR_PATTERN,
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    IdStr,
)

__all__ = [
    "FoodPassGenerate",
    "FoodPassScan",
    "FoodPassUpdate",
    "FoodPassResponse",
]


class FoodPassGenerate(BaseCreateSchema):
    """
    Manual batch issuance for a guest.

    One pass per member, per meal, per day in [start_date, end_date].
    """

    user_id: IdStr
    member_names: List[str] = Field(..., min_length=1, max_length=50)
    start_date: date
    end_date: date
    dining_hall: str = Field(default="", max_length=100)
    assignment_id: Optional[IdStr] = None

    @field_validator("member_names")
    @classmethod
    def validate_members(cls, v: List[str]) -> List[str]:
        names = [name.strip() for name in v if name and name.strip()]
        if not names:
            raise ValueError("At least one member name is required")
        return names

    @model_validator(mode="after")
    def validate_range(self) -> "FoodPassGenerate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class FoodPassScan(BaseSchema):
    """Scanned payload: the pass id. Any string is accepted; unknown ids fail redemption."""

    pass_id: str = Field(..., min_length=1, max_length=64)


class FoodPassUpdate(BaseUpdateSchema):
    """Staff correction of a pass. Redemption state is not patchable."""

    member_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    meal_type: Optional[MealType] = None
    pass_date: Optional[date] = None
    dining_hall: Optional[str] = Field(default=None, max_length=100)
    color_code: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)

    @field_validator("member_name", "meal_type", "pass_date", "dining_hall", "color_code")
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class FoodPassResponse(BaseResponseSchema):
    user_id: str
    member_name: str
    meal_type: MealType
    pass_date: date
    dining_hall: str
    color_code: str
    is_used: bool
    used_at: Optional[datetime] = None
    created_by: str
    assignment_id: Optional[str] = None
    qr_payload: str
