# recipebook/services/catalog_client.py
"""
Client for the external recipe catalog (Spoonacular-compatible API).

Three remote operations are used: recipe information by id, complex search and
random sampling. Responses are normalized into RecipeSummary / RecipeDetail so
callers never see the catalog's native JSON. Failures are not retried.
"""
import logging

import requests

from ..errors import NotFound, UpstreamError
from .types import RecipeDetail, RecipeSummary

logger = logging.getLogger(__name__)

ALLOWED_SEARCH_LIMITS = (5, 10, 15)
DEFAULT_SEARCH_LIMIT = 5


def clamp_search_limit(limit):
    """Anything outside the allowed page sizes silently becomes the default."""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_SEARCH_LIMIT
    if isinstance(limit, float) and limit != value:
        return DEFAULT_SEARCH_LIMIT
    return value if value in ALLOWED_SEARCH_LIMITS else DEFAULT_SEARCH_LIMIT


def _join_filter(value):
    if isinstance(value, (list, tuple)):
        value = ','.join(str(v).strip() for v in value if str(v).strip())
    return value or None


def summary_from_catalog(data):
    return RecipeSummary(
        id=data.get('id'),
        title=data.get('title'),
        ready_in_minutes=data.get('readyInMinutes'),
        image=data.get('image'),
        vegan=bool(data.get('vegan', False)),
        vegetarian=bool(data.get('vegetarian', False)),
        gluten_free=bool(data.get('glutenFree', False)),
        is_external=True,
        popularity=data.get('aggregateLikes'),
    )


def detail_from_catalog(data):
    ingredients = [
        item.get('original')
        for item in data.get('extendedIngredients') or []
        if isinstance(item, dict) and item.get('original')
    ]

    steps = []
    analyzed = data.get('analyzedInstructions') or []
    if analyzed and isinstance(analyzed[0], dict):
        steps = analyzed[0].get('steps') or []
    instructions = [step.get('step') for step in steps if isinstance(step, dict) and step.get('step')]

    summary = summary_from_catalog(data)
    return RecipeDetail(
        id=summary.id,
        title=summary.title,
        ready_in_minutes=summary.ready_in_minutes,
        image=summary.image,
        vegan=summary.vegan,
        vegetarian=summary.vegetarian,
        gluten_free=summary.gluten_free,
        is_external=True,
        popularity=summary.popularity,
        servings=data.get('servings'),
        ingredients=ingredients,
        instructions=instructions,
    )


class CatalogClient:
    """
    Thin wrapper over the catalog's REST endpoints.

    Args:
        base_url: e.g. "https://api.spoonacular.com/recipes"
        api_key: sent as the `apiKey` query parameter
        timeout: per-request timeout in seconds
        session: optional requests.Session (injected in tests)
    """

    def __init__(self, base_url, api_key, timeout=10, session=None):
        self.base_url = (base_url or '').rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path, params=None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = dict(params or {})
        query['apiKey'] = self.api_key
        logger.debug("Catalog request: GET /%s", path.lstrip('/'))

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning("Catalog request timed out: /%s", path)
            raise UpstreamError("Recipe catalog timed out") from e
        except requests.exceptions.RequestException as e:
            logger.warning("Catalog request failed: /%s (%s)", path, e)
            raise UpstreamError("Recipe catalog is unreachable") from e

        if response.status_code == 404:
            raise NotFound("Recipe not found")
        if not 200 <= response.status_code < 300:
            logger.warning("Catalog returned %s for /%s", response.status_code, path)
            raise UpstreamError(
                f"Recipe catalog returned status {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("Recipe catalog returned malformed JSON") from e

    def lookup(self, recipe_id):
        data = self._get(f"{recipe_id}/information", {'includeNutrition': 'false'})
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected catalog response shape")
        return detail_from_catalog(data)

    def search(self, query, limit=DEFAULT_SEARCH_LIMIT, cuisine=None, diet=None, intolerances=None):
        params = {
            'query': query,
            'number': clamp_search_limit(limit),
            'addRecipeInformation': 'true',
        }
        for name, value in (('cuisine', cuisine), ('diet', diet), ('intolerances', intolerances)):
            joined = _join_filter(value)
            if joined:
                params[name] = joined

        data = self._get('complexSearch', params)
        return [summary_from_catalog(r) for r in (data or {}).get('results') or []]

    def random_sample(self, count):
        data = self._get('random', {'number': count})
        return [summary_from_catalog(r) for r in (data or {}).get('recipes') or []]

    def exists(self, recipe_id):
        try:
            self.lookup(recipe_id)
        except NotFound:
            return False
        return True
