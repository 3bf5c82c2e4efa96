"""
FastAPI dependencies: sessions, caller identity, role gates, service
factories and the ServiceResult -> HTTP translation.

Example usage in a router:
    from fastapi import APIRouter, Depends
    from guesthouse.api import deps

    router = APIRouter()

    @router.get("/rooms")
    def list_rooms(caller = Depends(deps.get_current_principal)):
        ...
"""

from functools import lru_cache
from typing import Annotated, Any, Optional, Type

from fastapi import Depends, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings, get_settings
from guesthouse.core.exceptions import AuthenticationError, AuthorizationError, BaseAppException
from guesthouse.core.logging import user_id as user_id_ctx
from guesthouse.core.security import IdentityProvider, JWTIdentityProvider, Principal
from guesthouse.db.session import get_db
from guesthouse.integrations.guest_directory import GuestDirectory, build_guest_directory
from guesthouse.models.base.enums import UserRole
from guesthouse.schemas.common.base import UUID_PATTERN
from guesthouse.schemas.common.response import SuccessResponse, WarningDetail
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.services.booking.room_assignment_service import RoomAssignmentService
from guesthouse.services.booking.room_request_service import RoomRequestService
from guesthouse.services.mess.food_pass_category_service import FoodPassCategoryService
from guesthouse.services.mess.food_pass_service import FoodPassService
from guesthouse.services.room.room_category_service import RoomCategoryService
from guesthouse.services.room.room_service import RoomService
from guesthouse.utils.datetime_utils import Clock

# Path ids must be UUIDs; anything else is a 400 before any lookup
IdPath = Annotated[str, Path(pattern=UUID_PATTERN)]

bearer_scheme = HTTPBearer(auto_error=False)


# --- Settings, clock & collaborators ------------------------------------------

def get_app_settings() -> Settings:
    return get_settings()


def get_clock(settings: Settings = Depends(get_app_settings)) -> Clock:
    return Clock(settings.TIMEZONE)


def get_identity_provider(settings: Settings = Depends(get_app_settings)) -> IdentityProvider:
    return JWTIdentityProvider.from_settings(settings)


@lru_cache()
def _default_guest_directory() -> GuestDirectory:
    return build_guest_directory(get_settings())


def get_guest_directory() -> GuestDirectory:
    return _default_guest_directory()


# --- Authentication & Authorization -------------------------------------------

def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Principal:
    """Resolve the bearer token; 401 when it is missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    principal = provider.authenticate(credentials.credentials)
    user_id_ctx.set(principal.user_id)
    return principal


def require_staff(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_staff:
        raise AuthorizationError(required_roles=[UserRole.SUPER_ADMIN.value, UserRole.STAFF.value])
    return principal


def require_super_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_super_admin:
        raise AuthorizationError(required_roles=[UserRole.SUPER_ADMIN.value])
    return principal


# --- Services -----------------------------------------------------------------

def get_room_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    clock: Clock = Depends(get_clock),
) -> RoomService:
    return RoomService(db, settings, clock)


def get_room_category_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    clock: Clock = Depends(get_clock),
) -> RoomCategoryService:
    return RoomCategoryService(db, settings, clock)


def get_food_pass_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    clock: Clock = Depends(get_clock),
) -> FoodPassService:
    return FoodPassService(db, settings, clock)


def get_food_pass_category_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    clock: Clock = Depends(get_clock),
) -> FoodPassCategoryService:
    return FoodPassCategoryService(db, settings, clock)


def get_room_assignment_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    clock: Clock = Depends(get_clock),
) -> RoomAssignmentService:
    return RoomAssignmentService(db, settings, clock)


def get_room_request_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    clock: Clock = Depends(get_clock),
    directory: GuestDirectory = Depends(get_guest_directory),
) -> RoomRequestService:
    return RoomRequestService(db, settings, clock, guest_directory=directory)


# --- Result translation -------------------------------------------------------

def respond(result: ServiceResult, schema: Optional[Type[BaseModel]] = None) -> SuccessResponse:
    """
    Turn a ServiceResult into the success body, or raise so the exception
    handler renders the error body with the mapped status code.
    """
    if not result.is_success:
        error = result.error
        details = dict(error.details or {})
        if error.field:
            details.setdefault("field", error.field)
        raise BaseAppException(error.message, error.code, details)

    data: Any = result.data
    if schema is not None and data is not None:
        if isinstance(data, list):
            data = [schema.model_validate(item) for item in data]
        else:
            data = schema.model_validate(data)

    return SuccessResponse(
        message=result.message or "",
        data=data,
        warnings=[WarningDetail(**warning.to_dict()) for warning in result.warnings],
    )


__all__ = [
    "IdPath",
    "get_db",
    "get_app_settings",
    "get_clock",
    "get_identity_provider",
    "get_guest_directory",
    "get_current_principal",
    "require_staff",
    "require_super_admin",
    "get_room_service",
    "get_room_category_service",
    "get_food_pass_service",
    "get_food_pass_category_service",
    "get_room_assignment_service",
    "get_room_request_service",
    "respond",
]
