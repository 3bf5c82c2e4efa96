"""
Room registry service.

Owns room CRUD, visibility rules for non-staff callers and the occupancy
flag. The assignment engine claims a room with the repository's
conditional update inside its own transaction and releases it through
``set_occupied``.
"""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings
from guesthouse.core.exceptions import ErrorCode
from guesthouse.core.security import Principal
from guesthouse.models.base.enums import RoomType
from guesthouse.models.room.room import Room
from guesthouse.repositories.booking.room_assignment_repository import RoomAssignmentRepository
from guesthouse.repositories.room.room_category_repository import RoomCategoryRepository
from guesthouse.repositories.room.room_repository import RoomRepository
from guesthouse.schemas.room.room_base import RoomCreate, RoomUpdate
from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.utils.datetime_utils import Clock


class RoomService(BaseService[RoomRepository]):
    """
    Room registry operations.
    """

    def __init__(
        self,
        db_session: Session,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(RoomRepository(db_session), db_session, settings, clock)
        self.category_repository = RoomCategoryRepository(db_session)
        self.assignment_repository = RoomAssignmentRepository(db_session)

    # -------------------------------------------------------------------------
    # Create / Update / Delete
    # -------------------------------------------------------------------------

    def create(self, data: RoomCreate) -> ServiceResult[Room]:
        """
        Create a room.

        Returns:
            ALREADY_EXISTS if (room_number, building) is taken,
            INVALID_REFERENCE if the room category does not exist.
        """
        try:
            if self.repository.number_taken(data.room_number, data.building):
                return ServiceResult.conflict(
                    f"Room {data.room_number} already exists in building '{data.building}'",
                    details={"room_number": data.room_number, "building": data.building},
                    code=ErrorCode.ALREADY_EXISTS,
                )
            invalid = self._check_category(data.room_category_id)
            if invalid:
                return invalid

            values = data.model_dump(mode="json")
            values["room_type"] = data.room_type
            room = Room(**values, is_occupied=False, needs_cleaning=False)
            with self.transaction():
                self.repository.create(room)

            self._log_operation("create room", room.id, {"room_number": room.room_number})
            return ServiceResult.success(room, message="Room created successfully")
        except Exception as e:
            return self._handle_exception(e, "create room")

    def update(self, room_id: str, patch: RoomUpdate) -> ServiceResult[Room]:
        """
        Apply an allow-listed patch.

        Returns:
            NOT_FOUND if the room is absent, ALREADY_EXISTS if the new
            (room_number, building) belongs to another room.
        """
        try:
            room = self.repository.find_by_id(room_id)
            if room is None:
                return ServiceResult.not_found("Room", room_id)

            changes = patch.changes()
            if not changes:
                return ServiceResult.success(room, message="No changes")

            number = changes.get("room_number", room.room_number)
            building = changes.get("building", room.building)
            if (number, building) != (room.room_number, room.building) and self.repository.number_taken(
                number, building, exclude_id=room.id
            ):
                return ServiceResult.conflict(
                    f"Room {number} already exists in building '{building}'",
                    details={"room_number": number, "building": building},
                    code=ErrorCode.ALREADY_EXISTS,
                )

            if "room_category_id" in changes:
                invalid = self._check_category(changes["room_category_id"])
                if invalid:
                    return invalid

            if "beds" in changes:
                changes["beds"] = [bed.model_dump(mode="json") for bed in patch.beds]
            if changes.get("has_sofa_set") is False:
                changes["sofa_set_quantity"] = 0

            with self.transaction():
                self.repository.update(room, changes)

            self._log_operation("update room", room.id, {"fields": sorted(changes)})
            return ServiceResult.success(room, message="Room updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update room", room_id)

    def delete(self, room_id: str) -> ServiceResult[bool]:
        """Delete a room that no active assignment references."""
        try:
            room = self.repository.find_by_id(room_id, refresh=True)
            if room is None:
                return ServiceResult.not_found("Room", room_id)
            if room.is_occupied or self.assignment_repository.has_active_for_room(room_id):
                return ServiceResult.conflict(
                    "Room has an active assignment and cannot be deleted",
                    details={"room_id": room_id},
                    code=ErrorCode.ROOM_OCCUPIED,
                )
            if self.assignment_repository.has_any_for_room(room_id):
                return ServiceResult.conflict(
                    "Room has assignment history and cannot be deleted; hide it instead",
                    details={"room_id": room_id},
                )

            with self.transaction():
                self.repository.delete(room)

            self._log_operation("delete room", room_id)
            return ServiceResult.success(True, message="Room deleted successfully")
        except Exception as e:
            return self._handle_exception(e, "delete room", room_id)

    # -------------------------------------------------------------------------
    # Occupancy
    # -------------------------------------------------------------------------

    def set_occupied(self, room_id: str, occupied: bool) -> ServiceResult[bool]:
        """Idempotently set the occupancy flag."""
        try:
            with self.transaction():
                found = self.repository.set_occupied(room_id, occupied)
            if not found:
                return ServiceResult.not_found("Room", room_id)
            self._log_operation("set room occupancy", room_id, {"is_occupied": occupied})
            return ServiceResult.success(True)
        except Exception as e:
            return self._handle_exception(e, "set room occupancy", room_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, room_id: str, caller: Principal) -> ServiceResult[Room]:
        """Hidden rooms are reported as missing to non-staff callers."""
        try:
            room = self.repository.find_by_id(room_id, refresh=True)
            if room is None or (not room.is_visible and not caller.is_staff):
                return ServiceResult.not_found("Room", room_id)
            return ServiceResult.success(room)
        except Exception as e:
            return self._handle_exception(e, "get room", room_id)

    def list_rooms(
        self,
        caller: Principal,
        floor: Optional[int] = None,
        room_type: Optional[RoomType] = None,
        building: Optional[str] = None,
        is_visible: Optional[bool] = None,
        is_occupied: Optional[bool] = None,
    ) -> ServiceResult[List[Room]]:
        """
        List rooms. Non-staff callers always get visible rooms only,
        whatever visibility filter they sent.
        """
        if not caller.is_staff:
            is_visible = True
        try:
            rooms = self.repository.search(
                floor=floor,
                room_type=room_type,
                building=building,
                is_visible=is_visible,
                is_occupied=is_occupied,
            )
            return ServiceResult.success(rooms, metadata={"count": len(rooms)})
        except Exception as e:
            return self._handle_exception(e, "list rooms")

    def stats(self) -> ServiceResult[Dict[str, int]]:
        try:
            return ServiceResult.success(self.repository.occupancy_stats())
        except Exception as e:
            return self._handle_exception(e, "compute room stats")

    def buildings(self) -> ServiceResult[List[str]]:
        try:
            return ServiceResult.success(self.repository.visible_buildings())
        except Exception as e:
            return self._handle_exception(e, "list buildings")

    def floors(self, building: Optional[str]) -> ServiceResult[List[int]]:
        if not building or not building.strip():
            return ServiceResult.validation_failure("Building parameter is required", field="building")
        try:
            return ServiceResult.success(self.repository.visible_floors(building.strip()))
        except Exception as e:
            return self._handle_exception(e, "list floors", building)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_category(self, category_id: Optional[str]) -> Optional[ServiceResult]:
        if category_id and self.category_repository.find_by_id(category_id) is None:
            return ServiceResult.error_result(
                ErrorCode.INVALID_REFERENCE,
                "Room category does not exist",
                details={"room_category_id": category_id},
            )
        return None
