"""
Room category catalog service.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings
from guesthouse.models.room.room_category import RoomCategory
from guesthouse.repositories.room.room_category_repository import RoomCategoryRepository
from guesthouse.repositories.room.room_repository import RoomRepository
from guesthouse.schemas.room.room_category import RoomCategoryCreate, RoomCategoryUpdate
from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.utils.datetime_utils import Clock


class RoomCategoryService(BaseService[RoomCategoryRepository]):

    def __init__(self, db_session: Session, settings: Optional[Settings] = None, clock: Optional[Clock] = None):
        super().__init__(RoomCategoryRepository(db_session), db_session, settings, clock)
        self.room_repository = RoomRepository(db_session)

    def _images(self, images) -> list:
        now = self.clock.now().isoformat()
        result = []
        for image in images:
            item = image.model_dump(mode="json")
            item["uploaded_at"] = item.get("uploaded_at") or now
            result.append(item)
        return result

    def create(self, data: RoomCategoryCreate) -> ServiceResult[RoomCategory]:
        try:
            category = RoomCategory(
                room_name=data.room_name,
                price=data.price,
                images=self._images(data.images),
            )
            with self.transaction():
                self.repository.create(category)
            self._log_operation("create room category", category.id)
            return ServiceResult.success(category, message="Room category created successfully")
        except Exception as e:
            return self._handle_exception(e, "create room category")

    def list_categories(self) -> ServiceResult[List[RoomCategory]]:
        try:
            return ServiceResult.success(self.repository.list_all())
        except Exception as e:
            return self._handle_exception(e, "list room categories")

    def update(self, category_id: str, patch: RoomCategoryUpdate) -> ServiceResult[RoomCategory]:
        try:
            category = self.repository.find_by_id(category_id)
            if category is None:
                return ServiceResult.not_found("Room category", category_id)
            changes = patch.changes()
            if "images" in changes:
                changes["images"] = self._images(patch.images)
            with self.transaction():
                self.repository.update(category, changes)
            self._log_operation("update room category", category_id, {"fields": sorted(changes)})
            return ServiceResult.success(category, message="Room category updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update room category", category_id)

    def delete(self, category_id: str) -> ServiceResult[bool]:
        """Rooms pointing at the category keep existing with no category."""
        try:
            category = self.repository.find_by_id(category_id)
            if category is None:
                return ServiceResult.not_found("Room category", category_id)
            with self.transaction():
                self.room_repository.detach_category(category_id)
                self.repository.delete(category)
            self._log_operation("delete room category", category_id)
            return ServiceResult.success(True, message="Room category deleted successfully")
        except Exception as e:
            return self._handle_exception(e, "delete room category", category_id)
