"""
Food pass category schemas (dining hall -> colour).
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from guesthouse.schemas.common.base import (
    HEX_COLOR_PATTERN,
    BaseCreateSchema,
    BaseResponseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "FoodPassCategoryCreate",
    "FoodPassCategoryUpdate",
    "FoodPassCategoryResponse",
]


class FoodPassCategoryCreate(BaseCreateSchema):
    building_name: str = Field(..., min_length=1, max_length=100)
    color_code: str = Field(..., pattern=HEX_COLOR_PATTERN, examples=["#FF5733"])


class FoodPassCategoryUpdate(BaseUpdateSchema):
    building_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color_code: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)

    @field_validator("building_name", "color_code")
    @classmethod
    def reject_explicit_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class FoodPassCategoryResponse(BaseResponseSchema):
    building_name: str
    color_code: str
