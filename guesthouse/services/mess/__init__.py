from guesthouse.services.mess.food_pass_category_service import FoodPassCategoryService
from guesthouse.services.mess.food_pass_service import PASS_NOT_REDEEMABLE_MESSAGE, FoodPassService

__all__ = ["FoodPassCategoryService", "FoodPassService", "PASS_NOT_REDEEMABLE_MESSAGE"]
