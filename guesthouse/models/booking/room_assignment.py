"""
Room assignment model.

Binds a guest (and optionally the originating stay request) to a room
for a date range and carries the check-in/check-out state machine:
CREATED -> CHECKED_IN -> CHECKED_OUT.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from guesthouse.db.base import BaseModel, TimestampMixin
from guesthouse.models.base.enums import AssignmentState
from guesthouse.utils.datetime_utils import utc_now

__all__ = ["RoomAssignment"]


class RoomAssignment(BaseModel, TimestampMixin):
    """
    Assignment of a room to a guest.

    At most one assignment per room may have ``checked_out = false``;
    the partial unique index below enforces it in the store.
    """

    __tablename__ = "room_assignments"

    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    request_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("room_requests.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    guest_names: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    dining_hall_preference: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    check_in_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    assigned_by: Mapped[str] = mapped_column(String(36), nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    checked_in: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    checked_in_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    checked_out: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    checked_out_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_room_assignments_active_room",
            "room_id",
            unique=True,
            sqlite_where=text("checked_out = 0"),
            postgresql_where=text("checked_out = false"),
        ),
    )

    @property
    def state(self) -> AssignmentState:
        if self.checked_out:
            return AssignmentState.CHECKED_OUT
        if self.checked_in:
            return AssignmentState.CHECKED_IN
        return AssignmentState.CREATED
