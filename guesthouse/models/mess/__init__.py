from guesthouse.models.mess.food_pass import FoodPass
from guesthouse.models.mess.food_pass_category import FoodPassCategory

__all__ = ["FoodPass", "FoodPassCategory"]
