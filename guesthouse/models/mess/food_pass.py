"""
Meal pass model.

One single-use entitlement per (guest, member, meal, calendar day).
The pass id is the scannable payload.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from guesthouse.db.base import BaseModel, TimestampMixin
from guesthouse.models.base.enums import MealType

__all__ = ["FoodPass"]


class FoodPass(BaseModel, TimestampMixin):
    """
    Meal pass.

    Attributes:
        user_id: Owning guest
        member_name: Member of the party the pass is for
        meal_type: BREAKFAST, LUNCH or DINNER
        pass_date: Local calendar day the pass is valid for
        dining_hall: Dining hall label
        color_code: Display colour derived from the dining hall's category
        is_used: Set once, by redemption
        assignment_id: Stay the pass was issued for, when issued at check-in
    """

    __tablename__ = "food_passes"

    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    member_name: Mapped[str] = mapped_column(String(200), nullable=False)
    meal_type: Mapped[MealType] = mapped_column(
        SAEnum(MealType, name="meal_type", native_enum=False, length=20),
        nullable=False,
    )
    pass_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    dining_hall: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    color_code: Mapped[str] = mapped_column(String(7), nullable=False)

    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by: Mapped[str] = mapped_column(String(36), nullable=False)
    assignment_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("room_assignments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id", "member_name", "meal_type", "pass_date",
            name="uq_food_passes_entitlement",
        ),
        Index("ix_food_passes_user_used", "user_id", "is_used"),
    )

    @property
    def qr_payload(self) -> str:
        return self.id
