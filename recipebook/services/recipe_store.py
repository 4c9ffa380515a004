# recipebook/services/recipe_store.py
import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import Recipe, RecipeIngredient, RecipeInstruction
from .types import RecipeDetail, RecipeRef, RecipeSource, RecipeSummary

logger = logging.getLogger(__name__)


def _is_positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_text(value):
    return isinstance(value, str) and bool(value.strip())


def split_ingredient(line):
    """Split "2 cups Flour" into quantity "2" and name "cups Flour"."""
    parts = line.strip().split(None, 1)
    if len(parts) == 1:
        return '', parts[0]
    return parts[0], parts[1]


def validate_recipe_payload(data):
    """
    Check a recipe creation payload and return the normalized field values.
    Raises ValidationError on the first problem found; nothing is persisted.
    """
    if not isinstance(data, dict):
        raise ValidationError("Missing mandatory fields")

    title = data.get('title')
    ready_in_minutes = data.get('readyInMinutes')
    servings = data.get('servings')
    instructions = data.get('instructions')
    ingredients = data.get('ingredients')

    if not _is_text(title):
        raise ValidationError("Title must be a non-empty string")
    if not _is_positive_int(ready_in_minutes):
        raise ValidationError("readyInMinutes must be a positive integer")
    if not _is_positive_int(servings):
        raise ValidationError("servings must be a positive integer")
    if not isinstance(instructions, list) or not instructions:
        raise ValidationError("Instructions must be a non-empty list")
    if not all(_is_text(step) for step in instructions):
        raise ValidationError("Instructions must be non-empty strings")
    if not isinstance(ingredients, list) or not ingredients:
        raise ValidationError("Ingredients must be a non-empty list")

    parsed_ingredients = []
    for item in ingredients:
        if _is_text(item):
            parsed_ingredients.append(split_ingredient(item))
        elif isinstance(item, dict) and _is_text(item.get('name')) and _is_text(item.get('quantity')):
            parsed_ingredients.append((item['quantity'].strip(), item['name'].strip()))
        else:
            raise ValidationError("Ingredients must be valid strings or objects with name and quantity")

    flags = {}
    for field in ('vegan', 'vegetarian', 'glutenFree', 'isFamilyRecipe'):
        value = data.get(field, False)
        if value is None:
            value = False
        if not isinstance(value, bool):
            raise ValidationError(f"{field} must be a boolean")
        flags[field] = value

    image = data.get('image')
    if image is not None and not isinstance(image, str):
        raise ValidationError("image must be a string")

    family_story = data.get('familyStory') or {}
    if not isinstance(family_story, dict):
        raise ValidationError("familyStory must be an object with who and when")
    for key in ('who', 'when'):
        if family_story.get(key) is not None and not isinstance(family_story[key], str):
            raise ValidationError(f"familyStory.{key} must be a string")

    return {
        'title': title.strip(),
        'image': image or None,
        'ready_in_minutes': ready_in_minutes,
        'servings': servings,
        'vegan': flags['vegan'],
        'vegetarian': flags['vegetarian'],
        'gluten_free': flags['glutenFree'],
        'is_family_recipe': flags['isFamilyRecipe'],
        'family_who': family_story.get('who') if flags['isFamilyRecipe'] else None,
        'family_when': family_story.get('when') if flags['isFamilyRecipe'] else None,
        'instructions': [step.strip() for step in instructions],
        'ingredients': parsed_ingredients,
    }


class LocalRecipeStore:
    """User-authored recipes kept in the application's own database"""

    @staticmethod
    def _find(recipe_id):
        try:
            key = int(str(recipe_id).strip())
        except (TypeError, ValueError):
            return None
        return db.session.get(Recipe, key)

    @classmethod
    def create(cls, owner_id, data):
        """Persist a recipe with its ingredients and steps in a single transaction"""
        fields = validate_recipe_payload(data)

        recipe = Recipe(
            user_id=owner_id,
            title=fields['title'],
            image=fields['image'],
            ready_in_minutes=fields['ready_in_minutes'],
            servings=fields['servings'],
            vegan=fields['vegan'],
            vegetarian=fields['vegetarian'],
            gluten_free=fields['gluten_free'],
            is_family_recipe=fields['is_family_recipe'],
            family_who=fields['family_who'],
            family_when=fields['family_when'],
        )
        rows = [
            RecipeIngredient(recipe=recipe, name=name, quantity=quantity, display_order=order)
            for order, (quantity, name) in enumerate(fields['ingredients'])
        ]
        rows += [
            RecipeInstruction(recipe=recipe, step_number=number, instruction_text=text)
            for number, text in enumerate(fields['instructions'], start=1)
        ]

        try:
            db.session.add(recipe)
            db.session.add_all(rows)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to create recipe for user %s", owner_id)
            raise

        logger.info("User %s created recipe %s", owner_id, recipe.recipe_id)
        return recipe.recipe_id

    @classmethod
    def get(cls, recipe_id):
        recipe = cls._find(recipe_id)
        if recipe is None:
            raise NotFound("Recipe not found in DB")

        return RecipeDetail(
            id=recipe.recipe_id,
            title=recipe.title,
            ready_in_minutes=recipe.ready_in_minutes,
            image=recipe.image,
            vegan=bool(recipe.vegan),
            vegetarian=bool(recipe.vegetarian),
            gluten_free=bool(recipe.gluten_free),
            is_external=False,
            servings=recipe.servings,
            ingredients=[row.render() for row in recipe.ingredients],
            instructions=[row.instruction_text for row in recipe.instructions],
            author_id=recipe.user_id,
            is_family_recipe=bool(recipe.is_family_recipe),
            family_story=recipe.family_story(),
        )

    @classmethod
    def preview(cls, recipe_id):
        recipe = cls._find(recipe_id)
        if recipe is None:
            raise NotFound("Recipe not found in DB")

        return RecipeSummary(
            id=recipe.recipe_id,
            title=recipe.title,
            ready_in_minutes=recipe.ready_in_minutes,
            image=recipe.image,
            vegan=bool(recipe.vegan),
            vegetarian=bool(recipe.vegetarian),
            gluten_free=bool(recipe.gluten_free),
            is_external=False,
        )

    @classmethod
    def exists(cls, recipe_id):
        return cls._find(recipe_id) is not None

    @staticmethod
    def list_by_owner(owner_id):
        rows = Recipe.query.filter_by(user_id=owner_id).order_by(Recipe.recipe_id).all()
        return [RecipeRef(r.recipe_id, RecipeSource.LOCAL) for r in rows]

    @staticmethod
    def list_family_recipes_by_owner(owner_id):
        rows = Recipe.query.filter_by(user_id=owner_id, is_family_recipe=True) \
            .order_by(Recipe.recipe_id).all()
        return [RecipeRef(r.recipe_id, RecipeSource.LOCAL) for r in rows]
