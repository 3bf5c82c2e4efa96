"""
Food pass category catalog: dining hall name -> pass colour.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings
from guesthouse.core.exceptions import ErrorCode
from guesthouse.models.mess.food_pass_category import FoodPassCategory
from guesthouse.repositories.mess.food_pass_category_repository import FoodPassCategoryRepository
from guesthouse.schemas.mess.food_pass_category import FoodPassCategoryCreate, FoodPassCategoryUpdate
from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.utils.datetime_utils import Clock


class FoodPassCategoryService(BaseService[FoodPassCategoryRepository]):

    def __init__(self, db_session: Session, settings: Optional[Settings] = None, clock: Optional[Clock] = None):
        super().__init__(FoodPassCategoryRepository(db_session), db_session, settings, clock)

    def _duplicate(self, building_name: str) -> ServiceResult:
        return ServiceResult.conflict(
            f"A category for '{building_name}' already exists",
            details={"building_name": building_name},
            code=ErrorCode.ALREADY_EXISTS,
        )

    def create(self, data: FoodPassCategoryCreate) -> ServiceResult[FoodPassCategory]:
        try:
            if self.repository.find_by_building(data.building_name) is not None:
                return self._duplicate(data.building_name)
            category = FoodPassCategory(building_name=data.building_name, color_code=data.color_code.upper())
            with self.transaction():
                self.repository.create(category)
            self._log_operation("create food pass category", category.id, {"building_name": data.building_name})
            return ServiceResult.success(category, message="Food pass category created successfully")
        except Exception as e:
            return self._handle_exception(e, "create food pass category")

    def list_categories(self) -> ServiceResult[List[FoodPassCategory]]:
        try:
            return ServiceResult.success(self.repository.list_all())
        except Exception as e:
            return self._handle_exception(e, "list food pass categories")

    def update(self, category_id: str, patch: FoodPassCategoryUpdate) -> ServiceResult[FoodPassCategory]:
        try:
            category = self.repository.find_by_id(category_id)
            if category is None:
                return ServiceResult.not_found("Food pass category", category_id)
            changes = patch.changes()
            new_name = changes.get("building_name")
            if new_name and new_name != category.building_name:
                existing = self.repository.find_by_building(new_name)
                if existing is not None:
                    return self._duplicate(new_name)
            if "color_code" in changes:
                changes["color_code"] = changes["color_code"].upper()
            with self.transaction():
                self.repository.update(category, changes)
            self._log_operation("update food pass category", category_id, {"fields": sorted(changes)})
            return ServiceResult.success(category, message="Food pass category updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update food pass category", category_id)

    def delete(self, category_id: str) -> ServiceResult[bool]:
        """Existing passes keep the colour they were issued with."""
        try:
            category = self.repository.find_by_id(category_id)
            if category is None:
                return ServiceResult.not_found("Food pass category", category_id)
            with self.transaction():
                self.repository.delete(category)
            self._log_operation("delete food pass category", category_id)
            return ServiceResult.success(True, message="Food pass category deleted successfully")
        except Exception as e:
            return self._handle_exception(e, "delete food pass category", category_id)
