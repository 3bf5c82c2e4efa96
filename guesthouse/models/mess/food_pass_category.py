"""
Food pass category: the display colour for a dining hall.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from guesthouse.db.base import BaseModel, TimestampMixin

__all__ = ["FoodPassCategory"]


class FoodPassCategory(BaseModel, TimestampMixin):
    __tablename__ = "food_pass_categories"

    building_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    color_code: Mapped[str] = mapped_column(String(7), nullable=False)
