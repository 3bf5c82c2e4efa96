"""
Food pass category repository.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from guesthouse.models.mess.food_pass_category import FoodPassCategory
from guesthouse.repositories.base.base_repository import BaseRepository


class FoodPassCategoryRepository(BaseRepository[FoodPassCategory]):

    def __init__(self, db: Session):
        super().__init__(FoodPassCategory, db)

    def find_by_building(self, building_name: str) -> Optional[FoodPassCategory]:
        return self.find_one_by_criteria(FoodPassCategory.building_name == building_name)

    def list_all(self) -> List[FoodPassCategory]:
        return self.find_by_criteria(order_by=[FoodPassCategory.building_name])
