"""
Room repository: registry queries and the occupancy compare-and-swap.
"""

from typing import Dict, List, Optional

from sqlalchemy import and_, distinct, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guesthouse.core.exceptions import RepositoryError
from guesthouse.models.base.enums import RoomType
from guesthouse.models.room.room import Room
from guesthouse.repositories.base.base_repository import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """Repository for the room registry."""

    def __init__(self, db: Session):
        super().__init__(Room, db)

    def number_taken(self, room_number: str, building: str, exclude_id: Optional[str] = None) -> bool:
        """True if another room already uses (room_number, building)"""
        conditions = [Room.room_number == room_number, Room.building == building]
        if exclude_id:
            conditions.append(Room.id != exclude_id)
        return self.exists(*conditions)

    def search(
        self,
        floor: Optional[int] = None,
        room_type: Optional[RoomType] = None,
        building: Optional[str] = None,
        is_visible: Optional[bool] = None,
        is_occupied: Optional[bool] = None,
    ) -> List[Room]:
        conditions = []
        if floor is not None:
            conditions.append(Room.floor == floor)
        if room_type is not None:
            conditions.append(Room.room_type == room_type)
        if building is not None:
            conditions.append(Room.building == building)
        if is_visible is not None:
            conditions.append(Room.is_visible == is_visible)
        if is_occupied is not None:
            conditions.append(Room.is_occupied == is_occupied)

        return self.find_by_criteria(
            *conditions,
            order_by=[Room.building, Room.floor, Room.room_number],
        )

    # ==================== Occupancy ====================

    def claim(self, room_id: str) -> bool:
        """Atomically flip is_occupied false -> true; False if already occupied or missing."""
        return self.conditional_update(room_id, {"is_occupied": True}, Room.is_occupied.is_(False))

    def set_occupied(self, room_id: str, occupied: bool) -> bool:
        """
        Set the occupancy flag.

        Setting the current value is a no-op. Returns False only when the
        room does not exist.
        """
        if self.conditional_update(
            room_id, {"is_occupied": occupied}, Room.is_occupied.is_(not occupied)
        ):
            return True
        return self.exists(Room.id == room_id)

    def detach_category(self, category_id: str) -> int:
        """Clear room_category_id on every room in the category"""
        stmt = (
            update(Room)
            .where(Room.room_category_id == category_id)
            .values(room_category_id=None)
            .execution_options(synchronize_session=False)
        )
        try:
            return self.db.execute(stmt).rowcount or 0
        except SQLAlchemyError as e:
            raise RepositoryError("Detaching room category failed") from e

    # ==================== Aggregates ====================

    def occupancy_stats(self) -> Dict[str, int]:
        """Counts computed at read time"""
        total = self.count()
        occupied = self.count(Room.is_occupied.is_(True))
        return {"total": total, "occupied": occupied, "available": total - occupied}

    def visible_buildings(self) -> List[str]:
        stmt = (
            select(distinct(Room.building))
            .where(and_(Room.is_visible.is_(True), Room.building != ""))
            .order_by(Room.building)
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise RepositoryError("Building lookup failed") from e

    def visible_floors(self, building: str) -> List[int]:
        stmt = (
            select(distinct(Room.floor))
            .where(and_(Room.is_visible.is_(True), Room.building == building))
            .order_by(Room.floor)
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise RepositoryError("Floor lookup failed") from e
