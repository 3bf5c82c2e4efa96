"""
Room category model (presentation catalog: name, price label, images).
"""

from typing import Any, Dict, List

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from guesthouse.db.base import BaseModel, TimestampMixin

__all__ = ["RoomCategory"]


class RoomCategory(BaseModel, TimestampMixin):
    __tablename__ = "room_categories"

    room_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    price: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    images: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
