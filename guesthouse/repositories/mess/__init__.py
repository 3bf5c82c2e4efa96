from guesthouse.repositories.mess.food_pass_category_repository import FoodPassCategoryRepository
from guesthouse.repositories.mess.food_pass_repository import FoodPassRepository

__all__ = ["FoodPassCategoryRepository", "FoodPassRepository"]
