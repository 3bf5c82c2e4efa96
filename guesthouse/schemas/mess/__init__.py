from guesthouse.schemas.mess.food_pass import (
    FoodPassGenerate,
    FoodPassResponse,
    FoodPassScan,
    FoodPassUpdate,
)
from guesthouse.schemas.mess.food_pass_category import (
    FoodPassCategoryCreate,
    FoodPassCategoryResponse,
    FoodPassCategoryUpdate,
)

__all__ = [
    "FoodPassCategoryCreate",
    "FoodPassCategoryResponse",
    "FoodPassCategoryUpdate",
    "FoodPassGenerate",
    "FoodPassResponse",
    "FoodPassScan",
    "FoodPassUpdate",
]
