"""
Room category repository.
"""

from typing import List

from sqlalchemy.orm import Session

from guesthouse.models.room.room_category import RoomCategory
from guesthouse.repositories.base.base_repository import BaseRepository


class RoomCategoryRepository(BaseRepository[RoomCategory]):

    def __init__(self, db: Session):
        super().__init__(RoomCategory, db)

    def list_all(self) -> List[RoomCategory]:
        return self.find_by_criteria(order_by=[RoomCategory.room_name])
