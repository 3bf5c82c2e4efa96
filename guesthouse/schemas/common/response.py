"""
Standard API response wrappers for success and error bodies.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import Field

from guesthouse.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "WarningDetail",
    "SuccessResponse",
    "ErrorDetail",
    "ErrorResponse",
    "CountResponse",
]


class WarningDetail(BaseSchema):
    """A dependent effect that failed after the primary change succeeded."""

    code: str = Field(..., description="Warning code")
    message: str = Field(..., description="Warning message")
    details: Dict[str, Any] = Field(default_factory=dict)


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(default="", description="Response message")
    data: Optional[T] = Field(default=None, description="Response data")
    warnings: List[WarningDetail] = Field(default_factory=list)


class ErrorDetail(BaseSchema):
    code: str = Field(..., description="Application error code")
    message: str = Field(..., description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseSchema):
    """Standard error response."""

    success: bool = Field(default=False, description="Success flag")
    error: ErrorDetail
    request_id: Optional[str] = Field(default=None, description="Correlation id")


class CountResponse(BaseSchema):
    count: int = Field(..., ge=0)
