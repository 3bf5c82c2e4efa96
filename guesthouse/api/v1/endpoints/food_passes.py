"""
Meal pass and food pass category endpoints.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from guesthouse.api import deps
from guesthouse.api.deps import IdPath
from guesthouse.core.exceptions import AuthorizationError
from guesthouse.core.security import Principal
from guesthouse.schemas.common.response import CountResponse, SuccessResponse
from guesthouse.schemas.mess import (
    FoodPassCategoryCreate,
    FoodPassCategoryResponse,
    FoodPassCategoryUpdate,
    FoodPassGenerate,
    FoodPassResponse,
    FoodPassScan,
    FoodPassUpdate,
)
from guesthouse.services.mess.food_pass_category_service import FoodPassCategoryService
from guesthouse.services.mess.food_pass_service import FoodPassService

router = APIRouter(prefix="/food-passes", tags=["Food Passes"])


# --- Food pass categories (super admin) ---------------------------------------

@router.post(
    "/categories",
    response_model=SuccessResponse[FoodPassCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_food_pass_category(
    payload: FoodPassCategoryCreate,
    _: Principal = Depends(deps.require_super_admin),
    service: FoodPassCategoryService = Depends(deps.get_food_pass_category_service),
):
    return deps.respond(service.create(payload), FoodPassCategoryResponse)


@router.get("/categories", response_model=SuccessResponse[List[FoodPassCategoryResponse]])
def list_food_pass_categories(
    _: Principal = Depends(deps.require_super_admin),
    service: FoodPassCategoryService = Depends(deps.get_food_pass_category_service),
):
    return deps.respond(service.list_categories(), FoodPassCategoryResponse)


@router.put("/categories/{category_id}", response_model=SuccessResponse[FoodPassCategoryResponse])
def update_food_pass_category(
    category_id: IdPath,
    payload: FoodPassCategoryUpdate,
    _: Principal = Depends(deps.require_super_admin),
    service: FoodPassCategoryService = Depends(deps.get_food_pass_category_service),
):
    return deps.respond(service.update(category_id, payload), FoodPassCategoryResponse)


@router.delete("/categories/{category_id}", response_model=SuccessResponse[bool])
def delete_food_pass_category(
    category_id: IdPath,
    _: Principal = Depends(deps.require_super_admin),
    service: FoodPassCategoryService = Depends(deps.get_food_pass_category_service),
):
    return deps.respond(service.delete(category_id))


# --- Passes -------------------------------------------------------------------

@router.post("/generate", response_model=SuccessResponse[CountResponse], status_code=status.HTTP_201_CREATED)
def generate_food_passes(
    payload: FoodPassGenerate,
    staff: Principal = Depends(deps.require_staff),
    service: FoodPassService = Depends(deps.get_food_pass_service),
):
    result = service.issue_batch(
        user_id=payload.user_id,
        members=payload.member_names,
        start=payload.start_date,
        end=payload.end_date,
        dining_hall=payload.dining_hall,
        created_by=staff.user_id,
        assignment_id=payload.assignment_id,
    )
    if result.is_success:
        result.data = {"count": result.data}
    return deps.respond(result, CountResponse)


@router.post("/scan", response_model=SuccessResponse[FoodPassResponse])
def scan_food_pass(
    payload: FoodPassScan,
    _: Principal = Depends(deps.require_staff),
    service: FoodPassService = Depends(deps.get_food_pass_service),
):
    """Unknown, used and expired passes all get the same 400 response."""
    return deps.respond(service.redeem(payload.pass_id), FoodPassResponse)


@router.get("/user/{user_id}", response_model=SuccessResponse[List[FoodPassResponse]])
def list_user_food_passes(
    user_id: IdPath,
    pass_date: Optional[date] = Query(default=None, alias="date"),
    is_used: Optional[bool] = Query(default=None),
    caller: Principal = Depends(deps.get_current_principal),
    service: FoodPassService = Depends(deps.get_food_pass_service),
):
    if not caller.is_staff and caller.user_id != user_id:
        raise AuthorizationError("Guests can only view their own food passes")
    return deps.respond(service.list_for(user_id, pass_date=pass_date, is_used=is_used), FoodPassResponse)


@router.put("/{pass_id}", response_model=SuccessResponse[FoodPassResponse])
def update_food_pass(
    pass_id: IdPath,
    payload: FoodPassUpdate,
    _: Principal = Depends(deps.require_staff),
    service: FoodPassService = Depends(deps.get_food_pass_service),
):
    return deps.respond(service.update(pass_id, payload), FoodPassResponse)
