# recipebook/models/__init__.py
from .favorite_recipe import FavoriteRecipe
from .meal_plan_entry import MealPlanEntry, MEAL_TYPES
from .recipe import Recipe
from .recipe_ingredient import RecipeIngredient
from .recipe_instruction import RecipeInstruction
from .user import User
from .watch_event import WatchEvent

__all__ = [
    'FavoriteRecipe', 'MealPlanEntry', 'MEAL_TYPES', 'Recipe', 'RecipeIngredient',
    'RecipeInstruction', 'User', 'WatchEvent'
]
