"""
Stay request repository.

Owner edits, withdrawals and processing are single conditional
statements so the ownership/status gate and the write cannot interleave
with another caller.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from guesthouse.models.base.enums import RequestStatus
from guesthouse.models.booking.room_request import RoomRequest
from guesthouse.repositories.base.base_repository import BaseRepository


class RoomRequestRepository(BaseRepository[RoomRequest]):

    def __init__(self, db: Session):
        super().__init__(RoomRequest, db)

    def search(
        self,
        user_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> List[RoomRequest]:
        conditions = []
        if user_id is not None:
            conditions.append(RoomRequest.user_id == user_id)
        if status is not None:
            conditions.append(RoomRequest.status == status)
        return self.find_by_criteria(*conditions, order_by=[RoomRequest.created_at.desc()])

    def update_if_owner_pending(self, request_id: str, user_id: str, values: Dict[str, Any]) -> bool:
        return self.conditional_update(
            request_id,
            values,
            RoomRequest.user_id == user_id,
            RoomRequest.status == RequestStatus.PENDING,
        )

    def delete_if_owner_pending(self, request_id: str, user_id: str) -> bool:
        return self.conditional_delete(
            request_id,
            RoomRequest.user_id == user_id,
            RoomRequest.status == RequestStatus.PENDING,
        )

    def mark_processed(
        self,
        request_id: str,
        status: RequestStatus,
        processed_by: str,
        processed_at: datetime,
    ) -> bool:
        """Transition PENDING -> status exactly once."""
        return self.conditional_update(
            request_id,
            {"status": status, "processed_by": processed_by, "processed_at": processed_at},
            RoomRequest.status == RequestStatus.PENDING,
        )
