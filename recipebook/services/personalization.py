# recipebook/services/personalization.py
import logging

from ..errors import ValidationError
from ..utils.scaling import scale_quantity, scale_servings
from .interaction_tracker import InteractionTracker
from .types import RecipeSource

logger = logging.getLogger(__name__)

HOME_RANDOM_COUNT = 3
HOME_LAST_WATCHED_COUNT = 3
LOGIN_REQUIRED = {'loginRequired': True, 'loginUrl': '/login'}


def parse_multiplier(value, default=1):
    """Serving multiplier from a query string; must be a positive number."""
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValidationError("Invalid serving multiplier")
    try:
        multiplier = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid serving multiplier")
    if not multiplier > 0 or multiplier == float('inf'):
        raise ValidationError("Invalid serving multiplier")
    return multiplier


class PersonalizationComposer:
    """Builds the user-facing recipe views on top of the resolver and the tracker"""

    def __init__(self, resolver, tracker=InteractionTracker):
        self.resolver = resolver
        self.tracker = tracker

    def _annotate(self, summaries, user_id, source):
        favorite_ids = self.tracker.favorite_ids(user_id, source)
        results = []
        for summary in summaries:
            item = summary.to_dict()
            item['isFavorite'] = str(summary.id) in favorite_ids
            results.append(item)
        return results

    def home_feed(self, user_id=None):
        random_recipes = self.resolver.catalog.random_sample(HOME_RANDOM_COUNT)

        if user_id is None:
            return {
                'random': [r.to_dict() for r in random_recipes],
                'lastWatched': dict(LOGIN_REQUIRED),
            }

        external_favorites = self.tracker.favorite_ids(user_id, RecipeSource.EXTERNAL)
        local_favorites = self.tracker.favorite_ids(user_id, RecipeSource.LOCAL)

        random_payload = []
        for recipe in random_recipes:
            item = recipe.to_dict()
            item['isFavorite'] = str(recipe.id) in external_favorites
            random_payload.append(item)

        last_watched = []
        for ref in self.tracker.list_recently_watched(user_id, HOME_LAST_WATCHED_COUNT):
            # the watch event's own source decides both the lookup and the favorite set
            item = self.resolver.preview(ref).to_dict()
            favorites = external_favorites if ref.is_external else local_favorites
            item['isExternal'] = ref.is_external
            item['source'] = ref.source.value
            item['isFavorite'] = ref.recipe_id in favorites
            last_watched.append(item)

        return {'random': random_payload, 'lastWatched': last_watched}

    def recipe_detail_view(self, ref, user_id=None):
        detail = self.resolver.resolve(ref)
        payload = detail.to_dict()
        payload['isExternal'] = ref.is_external
        payload['source'] = ref.source.value

        if user_id is not None:
            self.tracker.record_watch(user_id, ref)
            payload['isFavorite'] = self.tracker.is_favorite(user_id, ref)
            payload['isWatched'] = True

        return payload

    def cooking_mode_view(self, ref, serving_multiplier):
        if isinstance(serving_multiplier, bool) or not isinstance(serving_multiplier, (int, float)) \
                or not serving_multiplier > 0:
            raise ValidationError("Invalid serving multiplier")

        detail = self.resolver.resolve(ref)
        ingredients = list(detail.ingredients)
        servings = detail.servings

        if serving_multiplier != 1:
            ingredients = [scale_quantity(line, serving_multiplier) for line in ingredients]
            servings = scale_servings(servings, serving_multiplier)

        return {
            'id': detail.id,
            'title': detail.title,
            'image': detail.image,
            'servings': servings,
            'originalServings': detail.servings,
            'readyInMinutes': detail.ready_in_minutes,
            'ingredients': ingredients,
            'instructions': list(detail.instructions),
            'currentStep': 0,
            'totalSteps': len(detail.instructions),
            'servingMultiplier': serving_multiplier,
            'isExternal': ref.is_external,
            'source': ref.source.value,
        }

    def search_view(self, query, limit=None, cuisine=None, diet=None, intolerances=None, user_id=None):
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Query parameter is required")

        results = self.resolver.catalog.search(
            query.strip(), limit, cuisine=cuisine, diet=diet, intolerances=intolerances
        )
        if user_id is None:
            return [r.to_dict() for r in results]
        return self._annotate(results, user_id, RecipeSource.EXTERNAL)

    def favorites_view(self, user_id):
        payload = []
        for source in (RecipeSource.EXTERNAL, RecipeSource.LOCAL):
            for ref in self.tracker.list_favorites(user_id, source):
                item = self.resolver.preview(ref).to_dict()
                item.update({'isFavorite': True, 'isExternal': ref.is_external, 'source': ref.source.value})
                payload.append(item)
        return payload

    def _local_previews(self, refs, user_id):
        return self._annotate([self.resolver.preview(ref) for ref in refs], user_id, RecipeSource.LOCAL)

    def my_recipes_view(self, user_id):
        return self._local_previews(self.resolver.store.list_by_owner(user_id), user_id)

    def family_recipes_view(self, user_id):
        return self._local_previews(self.resolver.store.list_family_recipes_by_owner(user_id), user_id)
