"""
Stay request endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from guesthouse.api import deps
from guesthouse.api.deps import IdPath
from guesthouse.core.security import Principal
from guesthouse.models.base.enums import RequestStatus
from guesthouse.schemas.booking import (
    RoomRequestAdminUpdate,
    RoomRequestCreate,
    RoomRequestProcess,
    RoomRequestResponse,
    RoomRequestUpdate,
)
from guesthouse.schemas.common.base import UUID_PATTERN
from guesthouse.schemas.common.response import SuccessResponse
from guesthouse.services.booking.room_request_service import RoomRequestService

router = APIRouter(prefix="/room-requests", tags=["Room Requests"])


@router.post("", response_model=SuccessResponse[RoomRequestResponse], status_code=status.HTTP_201_CREATED)
def submit_room_request(
    payload: RoomRequestCreate,
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    return deps.respond(service.submit(payload, caller))


@router.get("", response_model=SuccessResponse[List[RoomRequestResponse]])
def list_room_requests(
    request_status: Optional[RequestStatus] = Query(default=None, alias="status"),
    user_id: Optional[str] = Query(default=None, pattern=UUID_PATTERN),
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    """Guests get their own requests; the filters apply to staff only."""
    return deps.respond(service.list_for(caller, status=request_status, user_id=user_id))


@router.get("/{request_id}", response_model=SuccessResponse[RoomRequestResponse])
def get_room_request(
    request_id: IdPath,
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    return deps.respond(service.get(request_id, caller))


@router.put("/{request_id}", response_model=SuccessResponse[RoomRequestResponse])
def edit_room_request(
    request_id: IdPath,
    payload: RoomRequestUpdate,
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    return deps.respond(service.edit(request_id, caller, payload))


@router.put("/{request_id}/admin", response_model=SuccessResponse[RoomRequestResponse])
def admin_edit_room_request(
    request_id: IdPath,
    payload: RoomRequestAdminUpdate,
    _: Principal = Depends(deps.require_staff),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    return deps.respond(service.admin_edit(request_id, payload))


@router.delete("/{request_id}", response_model=SuccessResponse[bool])
def withdraw_room_request(
    request_id: IdPath,
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    return deps.respond(service.withdraw(request_id, caller))


@router.put("/{request_id}/process", response_model=SuccessResponse[RoomRequestResponse])
def process_room_request(
    request_id: IdPath,
    payload: RoomRequestProcess,
    staff: Principal = Depends(deps.require_staff),
    service: RoomRequestService = Depends(deps.get_room_request_service),
):
    return deps.respond(service.process(request_id, payload, staff.user_id))
