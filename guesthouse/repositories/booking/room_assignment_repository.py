"""
Room assignment repository: lookups and the check-in/check-out
compare-and-swap transitions.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from guesthouse.models.booking.room_assignment import RoomAssignment
from guesthouse.repositories.base.base_repository import BaseRepository


class RoomAssignmentRepository(BaseRepository[RoomAssignment]):

    def __init__(self, db: Session):
        super().__init__(RoomAssignment, db)

    def has_active_for_room(self, room_id: str) -> bool:
        return self.exists(
            RoomAssignment.room_id == room_id,
            RoomAssignment.checked_out.is_(False),
        )

    def has_any_for_room(self, room_id: str) -> bool:
        return self.exists(RoomAssignment.room_id == room_id)

    def find_other_active_for_user(self, user_id: str, exclude_id: str) -> List[RoomAssignment]:
        """The guest's stays that are not checked out, other than ``exclude_id``"""
        return self.find_by_criteria(
            RoomAssignment.user_id == user_id,
            RoomAssignment.id != exclude_id,
            RoomAssignment.checked_out.is_(False),
        )

    def find_latest_for_request(self, request_id: str) -> Optional[RoomAssignment]:
        results = self.find_by_criteria(
            RoomAssignment.request_id == request_id,
            order_by=[RoomAssignment.assigned_at.desc()],
            limit=1,
        )
        return results[0] if results else None

    def search(
        self,
        room_id: Optional[str] = None,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        active_only: bool = False,
    ) -> List[RoomAssignment]:
        conditions = []
        if room_id is not None:
            conditions.append(RoomAssignment.room_id == room_id)
        if user_id is not None:
            conditions.append(RoomAssignment.user_id == user_id)
        if request_id is not None:
            conditions.append(RoomAssignment.request_id == request_id)
        if active_only:
            conditions.append(RoomAssignment.checked_out.is_(False))
        return self.find_by_criteria(*conditions, order_by=[RoomAssignment.assigned_at.desc()])

    # ==================== State transitions ====================

    def mark_checked_in(self, assignment_id: str, at: datetime) -> bool:
        """CREATED -> CHECKED_IN"""
        return self.conditional_update(
            assignment_id,
            {"checked_in": True, "checked_in_at": at},
            RoomAssignment.checked_in.is_(False),
            RoomAssignment.checked_out.is_(False),
        )

    def mark_checked_out(self, assignment_id: str, at: datetime) -> bool:
        """CHECKED_IN -> CHECKED_OUT"""
        return self.conditional_update(
            assignment_id,
            {"checked_out": True, "checked_out_at": at},
            RoomAssignment.checked_in.is_(True),
            RoomAssignment.checked_out.is_(False),
        )
