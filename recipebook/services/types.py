# recipebook/services/types.py
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..errors import NotFound, ValidationError

LOCAL_ID_PATTERN = re.compile(r'[0-9]+')


class RecipeSource(Enum):
    """Where a recipe lives. The value is the `source` query parameter."""
    EXTERNAL = 'spoon'
    LOCAL = 'db'

    @property
    def is_external(self):
        return self is RecipeSource.EXTERNAL

    @classmethod
    def from_flag(cls, is_external):
        return cls.EXTERNAL if is_external else cls.LOCAL


@dataclass(frozen=True)
class RecipeRef:
    """Composite recipe identity. The same id may exist in both sources."""
    recipe_id: str
    source: RecipeSource

    def __post_init__(self):
        # int ids and their string form must compare equal
        recipe_id = str(self.recipe_id).strip()
        if self.source is RecipeSource.LOCAL:
            # local ids are database integers, so "07" and 7 name the same row
            if not LOCAL_ID_PATTERN.fullmatch(recipe_id):
                raise NotFound("Recipe not found in DB")
            recipe_id = str(int(recipe_id))
        object.__setattr__(self, 'recipe_id', recipe_id)

    @property
    def is_external(self):
        return self.source.is_external

    @classmethod
    def from_query(cls, recipe_id, source=None):
        """Lenient parsing used by read endpoints: unknown sources fall back to the catalog."""
        _require_id(recipe_id)
        value = (source or '').strip().lower()
        if value == RecipeSource.LOCAL.value:
            return cls(recipe_id, RecipeSource.LOCAL)
        return cls(recipe_id, RecipeSource.EXTERNAL)

    @classmethod
    def from_flag(cls, recipe_id, is_external):
        """Strict parsing used by writes: the caller must say which source it means."""
        _require_id(recipe_id)
        if not isinstance(is_external, bool):
            raise ValidationError("isExternal parameter is required and must be boolean")
        return cls(recipe_id, RecipeSource.from_flag(is_external))

    def key(self):
        return f"{self.recipe_id}-{self.source.value}"


def _require_id(recipe_id):
    if recipe_id is None or isinstance(recipe_id, bool) or not str(recipe_id).strip():
        raise ValidationError("Invalid recipeId")


@dataclass
class RecipeSummary:
    id: object
    title: str
    ready_in_minutes: Optional[int]
    image: Optional[str]
    vegan: bool
    vegetarian: bool
    gluten_free: bool
    is_external: bool
    popularity: Optional[int] = None

    @property
    def ref(self):
        return RecipeRef(self.id, RecipeSource.from_flag(self.is_external))

    def to_dict(self):
        data = {
            'id': self.id,
            'title': self.title,
            'readyInMinutes': self.ready_in_minutes,
            'image': self.image,
            'vegan': self.vegan,
            'vegetarian': self.vegetarian,
            'glutenFree': self.gluten_free,
            'isExternal': self.is_external,
            'source': RecipeSource.from_flag(self.is_external).value,
        }
        if self.popularity is not None:
            data['popularity'] = self.popularity
        return data


@dataclass
class RecipeDetail(RecipeSummary):
    servings: Optional[int] = None
    ingredients: list = field(default_factory=list)
    instructions: list = field(default_factory=list)
    # local recipes only
    author_id: Optional[int] = None
    is_family_recipe: bool = False
    family_story: Optional[dict] = None

    def summary(self):
        return RecipeSummary(
            id=self.id,
            title=self.title,
            ready_in_minutes=self.ready_in_minutes,
            image=self.image,
            vegan=self.vegan,
            vegetarian=self.vegetarian,
            gluten_free=self.gluten_free,
            is_external=self.is_external,
            popularity=self.popularity,
        )

    def to_dict(self):
        data = super().to_dict()
        data.update({
            'servings': self.servings,
            'ingredients': list(self.ingredients),
            'instructions': list(self.instructions),
        })
        if not self.is_external:
            data.update({
                'authorId': self.author_id,
                'isFamilyRecipe': self.is_family_recipe,
                'familyStory': self.family_story,
            })
        return data
