"""
Stay request model.

A guest-submitted request for accommodation over a date range, subject
to staff approval. The headcount total is always derived server-side.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum as SAEnum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from guesthouse.db.base import BaseModel, TimestampMixin
from guesthouse.models.base.enums import RequestStatus

__all__ = ["RoomRequest"]


class RoomRequest(BaseModel, TimestampMixin):
    """
    Stay request submitted by a guest.

    Attributes:
        public_id: Short shareable code (REQ-YYYYMMDD-XXXX), not unique
        user_id: Requesting guest
        status: PENDING until processed exactly once by staff
        processed_by: Staff member who approved or rejected
        processed_at: When the request was processed
    """

    __tablename__ = "room_requests"

    public_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    form_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    place: Mapped[str] = mapped_column(String(200), nullable=False)
    purpose: Mapped[str] = mapped_column(Text, nullable=False)
    special_requests: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reference: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    check_in_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Headcount
    male: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    female: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[RequestStatus] = mapped_column(
        SAEnum(RequestStatus, name="request_status", native_enum=False, length=20),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )
    processed_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_room_requests_user_status", "user_id", "status"),
    )

    @staticmethod
    def headcount_total(male: int, female: int, children: int) -> int:
        return male + female + children

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
