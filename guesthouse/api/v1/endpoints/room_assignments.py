"""
Room assignment endpoints (staff only).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from guesthouse.api import deps
from guesthouse.api.deps import IdPath
from guesthouse.core.security import Principal
from guesthouse.schemas.booking import (
    CheckInResult,
    CheckOutResult,
    PassIssuanceResult,
    RoomAssignmentCreate,
    RoomAssignmentResponse,
)
from guesthouse.schemas.common.base import UUID_PATTERN
from guesthouse.schemas.common.response import SuccessResponse
from guesthouse.services.booking.room_assignment_service import RoomAssignmentService

router = APIRouter(prefix="/room-assignments", tags=["Room Assignments"])


@router.post("", response_model=SuccessResponse[RoomAssignmentResponse], status_code=status.HTTP_201_CREATED)
def assign_room(
    payload: RoomAssignmentCreate,
    staff: Principal = Depends(deps.require_staff),
    service: RoomAssignmentService = Depends(deps.get_room_assignment_service),
):
    result = service.assign(
        room_id=payload.room_id,
        user_id=payload.user_id,
        check_in_date=payload.check_in_date,
        check_out_date=payload.check_out_date,
        assigned_by=staff.user_id,
        request_id=payload.request_id,
        guest_names=payload.guest_names,
        dining_hall_preference=payload.dining_hall_preference,
    )
    return deps.respond(result, RoomAssignmentResponse)


@router.get("", response_model=SuccessResponse[List[RoomAssignmentResponse]])
def list_room_assignments(
    room_id: Optional[str] = Query(default=None, pattern=UUID_PATTERN),
    user_id: Optional[str] = Query(default=None, pattern=UUID_PATTERN),
    request_id: Optional[str] = Query(default=None, pattern=UUID_PATTERN),
    active_only: bool = Query(default=False),
    _: Principal = Depends(deps.require_staff),
    service: RoomAssignmentService = Depends(deps.get_room_assignment_service),
):
    result = service.list_assignments(
        room_id=room_id,
        user_id=user_id,
        request_id=request_id,
        active_only=active_only,
    )
    return deps.respond(result, RoomAssignmentResponse)


@router.get("/{assignment_id}", response_model=SuccessResponse[RoomAssignmentResponse])
def get_room_assignment(
    assignment_id: IdPath,
    _: Principal = Depends(deps.require_staff),
    service: RoomAssignmentService = Depends(deps.get_room_assignment_service),
):
    return deps.respond(service.get(assignment_id), RoomAssignmentResponse)


@router.put("/{assignment_id}/check-in", response_model=SuccessResponse[CheckInResult])
def check_in(
    assignment_id: IdPath,
    staff: Principal = Depends(deps.require_staff),
    service: RoomAssignmentService = Depends(deps.get_room_assignment_service),
):
    """A PASS_ISSUANCE_FAILED warning means the check-in stands but passes must be reissued."""
    return deps.respond(service.check_in(assignment_id, staff.user_id), CheckInResult)


@router.put("/{assignment_id}/check-out", response_model=SuccessResponse[CheckOutResult])
def check_out(
    assignment_id: IdPath,
    staff: Principal = Depends(deps.require_staff),
    service: RoomAssignmentService = Depends(deps.get_room_assignment_service),
):
    return deps.respond(service.check_out(assignment_id, staff.user_id), CheckOutResult)


@router.post("/{assignment_id}/food-passes", response_model=SuccessResponse[PassIssuanceResult])
def reissue_food_passes(
    assignment_id: IdPath,
    staff: Principal = Depends(deps.require_staff),
    service: RoomAssignmentService = Depends(deps.get_room_assignment_service),
):
    result = service.reissue_passes(assignment_id, staff.user_id)
    if result.is_success:
        result.data = {"assignment_id": assignment_id, "passes_issued": result.data}
    return deps.respond(result, PassIssuanceResult)
