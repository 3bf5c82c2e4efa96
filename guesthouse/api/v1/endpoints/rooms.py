"""
Room registry and room category endpoints.

Static paths (categories, stats, buildings, floors) are declared before
``/{room_id}`` so they are not captured by the id route.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from guesthouse.api import deps
from guesthouse.api.deps import IdPath
from guesthouse.core.security import Principal
from guesthouse.models.base.enums import RoomType
from guesthouse.schemas.common.response import SuccessResponse
from guesthouse.schemas.room import (
    RoomCategoryCreate,
    RoomCategoryResponse,
    RoomCategoryUpdate,
    RoomCreate,
    RoomResponse,
    RoomStats,
    RoomUpdate,
)
from guesthouse.services.room.room_category_service import RoomCategoryService
from guesthouse.services.room.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


# --- Room categories (super admin) --------------------------------------------

@router.post(
    "/categories",
    response_model=SuccessResponse[RoomCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_room_category(
    payload: RoomCategoryCreate,
    _: Principal = Depends(deps.require_super_admin),
    service: RoomCategoryService = Depends(deps.get_room_category_service),
):
    return deps.respond(service.create(payload), RoomCategoryResponse)


@router.get("/categories", response_model=SuccessResponse[List[RoomCategoryResponse]])
def list_room_categories(
    _: Principal = Depends(deps.require_super_admin),
    service: RoomCategoryService = Depends(deps.get_room_category_service),
):
    return deps.respond(service.list_categories(), RoomCategoryResponse)


@router.put("/categories/{category_id}", response_model=SuccessResponse[RoomCategoryResponse])
def update_room_category(
    category_id: IdPath,
    payload: RoomCategoryUpdate,
    _: Principal = Depends(deps.require_super_admin),
    service: RoomCategoryService = Depends(deps.get_room_category_service),
):
    return deps.respond(service.update(category_id, payload), RoomCategoryResponse)


@router.delete("/categories/{category_id}", response_model=SuccessResponse[bool])
def delete_room_category(
    category_id: IdPath,
    _: Principal = Depends(deps.require_super_admin),
    service: RoomCategoryService = Depends(deps.get_room_category_service),
):
    return deps.respond(service.delete(category_id))


# --- Rooms --------------------------------------------------------------------

@router.post("", response_model=SuccessResponse[RoomResponse], status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    _: Principal = Depends(deps.require_staff),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.create(payload), RoomResponse)


@router.get("", response_model=SuccessResponse[List[RoomResponse]])
def list_rooms(
    floor: Optional[int] = Query(default=None),
    room_type: Optional[RoomType] = Query(default=None),
    building: Optional[str] = Query(default=None),
    is_visible: Optional[bool] = Query(default=None),
    is_occupied: Optional[bool] = Query(default=None),
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomService = Depends(deps.get_room_service),
):
    """Non-staff callers only ever see visible rooms."""
    result = service.list_rooms(
        caller,
        floor=floor,
        room_type=room_type,
        building=building,
        is_visible=is_visible,
        is_occupied=is_occupied,
    )
    return deps.respond(result, RoomResponse)


@router.get("/stats", response_model=SuccessResponse[RoomStats])
def room_stats(
    _: Principal = Depends(deps.get_current_principal),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.stats(), RoomStats)


@router.get("/buildings", response_model=SuccessResponse[List[str]])
def list_buildings(
    _: Principal = Depends(deps.get_current_principal),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.buildings())


@router.get("/floors", response_model=SuccessResponse[List[int]])
def list_floors(
    building: Optional[str] = Query(default=None),
    _: Principal = Depends(deps.get_current_principal),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.floors(building))


@router.get("/{room_id}", response_model=SuccessResponse[RoomResponse])
def get_room(
    room_id: IdPath,
    caller: Principal = Depends(deps.get_current_principal),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.get(room_id, caller), RoomResponse)


@router.put("/{room_id}", response_model=SuccessResponse[RoomResponse])
def update_room(
    room_id: IdPath,
    payload: RoomUpdate,
    _: Principal = Depends(deps.require_staff),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.update(room_id, payload), RoomResponse)


@router.delete("/{room_id}", response_model=SuccessResponse[bool])
def delete_room(
    room_id: IdPath,
    _: Principal = Depends(deps.require_staff),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.delete(room_id))
