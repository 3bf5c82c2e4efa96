"""
API v1 Router - Main Entry Point
Aggregates all v1 endpoints of the guest accommodation service.
"""
from fastapi import APIRouter

from guesthouse.api.v1.endpoints import food_passes, room_assignments, room_requests, rooms

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(rooms.router)
router.include_router(room_requests.router)
router.include_router(room_assignments.router)
router.include_router(food_passes.router)

__all__ = ["router"]
