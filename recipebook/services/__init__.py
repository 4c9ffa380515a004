from .auth_service import AuthService
from .catalog_client import CatalogClient
from .cooking_progress import CookingProgressStore
from .country_cache import CountryCache
from .interaction_tracker import InteractionTracker
from .meal_plan import MealPlanService
from .personalization import PersonalizationComposer
from .recipe_resolver import RecipeResolver
from .recipe_store import LocalRecipeStore
from .types import RecipeDetail, RecipeRef, RecipeSource, RecipeSummary

__all__ = ['AuthService', 'CatalogClient', 'CookingProgressStore', 'CountryCache', 'InteractionTracker',
           'MealPlanService', 'PersonalizationComposer', 'RecipeResolver', 'LocalRecipeStore',
           'RecipeDetail', 'RecipeRef', 'RecipeSource', 'RecipeSummary']
