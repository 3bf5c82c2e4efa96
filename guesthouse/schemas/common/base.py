"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

__all__ = [
    "UUID_PATTERN",
    "HEX_COLOR_PATTERN",
    "IdStr",
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
]

# Identifiers are UUID strings; anything else is a malformed reference.
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

IdStr = Annotated[str, StringConstraints(strip_whitespace=True, pattern=UUID_PATTERN)]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for create payloads; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class BaseUpdateSchema(BaseSchema):
    """
    Base schema for patch payloads.

    Every field is optional; only fields the caller actually sent are
    applied, and fields outside the schema are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> Dict[str, Any]:
        """Explicitly supplied fields, ready to merge into the entity"""
        return self.model_dump(exclude_unset=True)


class BaseResponseSchema(BaseSchema):
    """Base schema for entities returned by the API."""

    id: str = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
