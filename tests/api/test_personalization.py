from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from recipebook.errors import NotFound, UpstreamError, ValidationError
from recipebook.services.interaction_tracker import InteractionTracker
from recipebook.services.personalization import LOGIN_REQUIRED, PersonalizationComposer
from recipebook.services.recipe_resolver import RecipeResolver
from recipebook.services.recipe_store import LocalRecipeStore
from recipebook.services.types import RecipeRef, RecipeSource
from tests.conftest import catalog_recipe


@pytest.fixture
def composer(catalog):
    return PersonalizationComposer(RecipeResolver(catalog))


def local_recipe(owner, **overrides):
    data = {
        "title": "Bread",
        "readyInMinutes": 60,
        "servings": 4,
        "instructions": ["Knead.", "Bake."],
        "ingredients": ["2 cups Flour", "1 tsp Salt"],
    }
    data.update(overrides)
    return LocalRecipeStore.create(owner, data)


@pytest.mark.usefixtures("ctx")
class TestCookingMode:
    def test_doubling_a_local_recipe(self, composer, make_user):
        recipe_id = local_recipe(make_user())

        view = composer.cooking_mode_view(RecipeRef(recipe_id, RecipeSource.LOCAL), 2)

        assert view["ingredients"] == ["4.0 cups Flour", "2.0 tsp Salt"]
        assert view["servings"] == 8
        assert view["originalServings"] == 4
        assert view["totalSteps"] == 2
        assert view["currentStep"] == 0
        assert view["source"] == "db"

    @pytest.mark.parametrize("source", [RecipeSource.LOCAL, RecipeSource.EXTERNAL])
    def test_multiplier_one_matches_detail_view(self, composer, make_user, source):
        recipe_id = local_recipe(make_user()) if source is RecipeSource.LOCAL else 99
        ref = RecipeRef(recipe_id, source)

        detail = composer.recipe_detail_view(ref)
        view = composer.cooking_mode_view(ref, 1)

        assert view["ingredients"] == detail["ingredients"]
        assert view["servings"] == detail["servings"]

    @pytest.mark.parametrize("multiplier", [0, -1, True, "2"])
    def test_invalid_multiplier(self, composer, multiplier):
        with pytest.raises(ValidationError):
            composer.cooking_mode_view(RecipeRef(99, RecipeSource.EXTERNAL), multiplier)


@pytest.mark.usefixtures("ctx")
class TestRecipeDetailView:
    def test_anonymous_view_has_no_user_annotations(self, composer):
        view = composer.recipe_detail_view(RecipeRef(99, RecipeSource.EXTERNAL))

        assert "isFavorite" not in view
        assert "isWatched" not in view
        assert view["source"] == "spoon"
        assert view["isExternal"] is True

    def test_logged_in_view_records_watch_with_same_source(self, composer, make_user):
        user = make_user()
        ref = RecipeRef(99, RecipeSource.EXTERNAL)

        view = composer.recipe_detail_view(ref, user)

        assert view["isWatched"] is True
        assert view["isFavorite"] is False
        assert InteractionTracker.list_recently_watched(user) == [ref]

    def test_favorite_for_other_source_does_not_leak(self, composer, make_user):
        user = make_user()
        recipe_id = local_recipe(user)
        composer.resolver.catalog.add(catalog_recipe(recipe_id))
        InteractionTracker.toggle_favorite(user, RecipeRef(recipe_id, RecipeSource.EXTERNAL))

        view = composer.recipe_detail_view(RecipeRef(recipe_id, RecipeSource.LOCAL), user)

        assert view["isFavorite"] is False

    def test_missing_local_recipe_propagates_not_found(self, composer, make_user):
        user = make_user()

        with pytest.raises(NotFound):
            composer.recipe_detail_view(RecipeRef(555, RecipeSource.LOCAL), user)
        assert InteractionTracker.list_recently_watched(user) == []

    def test_catalog_errors_propagate(self, composer):
        def broken(recipe_id):
            raise UpstreamError("quota exceeded")

        composer.resolver.catalog.lookup = broken

        with pytest.raises(UpstreamError):
            composer.recipe_detail_view(RecipeRef(99, RecipeSource.EXTERNAL))


@pytest.mark.usefixtures("ctx")
class TestHomeFeed:
    def test_anonymous_feed(self, composer):
        feed = composer.home_feed()

        assert len(feed["random"]) == 3
        assert feed["lastWatched"] == LOGIN_REQUIRED
        assert all("isFavorite" not in r for r in feed["random"])

    def test_user_without_history_gets_empty_list(self, composer, make_user):
        assert composer.home_feed(make_user())["lastWatched"] == []

    def test_random_recipes_checked_against_external_favorites(self, composer, make_user):
        user = make_user()
        InteractionTracker.toggle_favorite(user, RecipeRef(2, RecipeSource.EXTERNAL))
        InteractionTracker.toggle_favorite(user, RecipeRef(3, RecipeSource.LOCAL))

        feed = composer.home_feed(user)

        assert [r["isFavorite"] for r in feed["random"]] == [False, True, False]

    def test_last_watched_keeps_source_and_checks_matching_favorites(self, composer, make_user):
        user = make_user()
        local_id = local_recipe(user)
        catalog = composer.resolver.catalog
        for recipe_id in (local_id, 1001, 1002):
            catalog.add(catalog_recipe(recipe_id))
        base = datetime(2024, 5, 1)
        InteractionTracker.record_watch(user, RecipeRef(local_id, RecipeSource.LOCAL), watched_at=base)
        InteractionTracker.record_watch(user, RecipeRef(99, RecipeSource.EXTERNAL), watched_at=base + timedelta(hours=1))
        InteractionTracker.record_watch(user, RecipeRef(1001, RecipeSource.EXTERNAL), watched_at=base + timedelta(hours=2))
        InteractionTracker.record_watch(user, RecipeRef(1002, RecipeSource.EXTERNAL), watched_at=base - timedelta(days=1))
        # external favorite with the local recipe's id must not mark the local one
        InteractionTracker.toggle_favorite(user, RecipeRef(local_id, RecipeSource.EXTERNAL))
        InteractionTracker.toggle_favorite(user, RecipeRef(99, RecipeSource.EXTERNAL))

        watched = composer.home_feed(user)["lastWatched"]

        assert [(str(w["id"]), w["source"]) for w in watched] == [
            ("1001", "spoon"), ("99", "spoon"), (str(local_id), "db"),
        ]
        assert [w["isFavorite"] for w in watched] == [False, True, False]
        assert watched[2]["isExternal"] is False


@pytest.mark.usefixtures("ctx")
class TestListViews:
    def test_search_requires_query(self, composer):
        with pytest.raises(ValidationError):
            composer.search_view("   ")

    def test_search_annotates_external_favorites(self, composer, make_user):
        user = make_user()
        InteractionTracker.toggle_favorite(user, RecipeRef(99, RecipeSource.EXTERNAL))

        results = composer.search_view("eggs", 10, user_id=user)

        assert {str(r["id"]): r["isFavorite"] for r in results}["99"] is True

    def test_favorites_view_lists_both_sources(self, composer, make_user):
        user = make_user()
        local_id = local_recipe(user)
        InteractionTracker.toggle_favorite(user, RecipeRef(local_id, RecipeSource.LOCAL))
        InteractionTracker.toggle_favorite(user, RecipeRef(99, RecipeSource.EXTERNAL))

        favorites = composer.favorites_view(user)

        assert [(str(f["id"]), f["source"]) for f in favorites] == [("99", "spoon"), (str(local_id), "db")]
        assert all(f["isFavorite"] for f in favorites)

    def test_my_and_family_recipes(self, composer, make_user):
        user = make_user()
        plain = local_recipe(user)
        family = local_recipe(user, isFamilyRecipe=True, familyStory={"who": "Dad", "when": "Sundays"})
        InteractionTracker.toggle_favorite(user, RecipeRef(family, RecipeSource.LOCAL))

        mine = composer.my_recipes_view(user)
        family_only = composer.family_recipes_view(user)

        assert [(r["id"], r["isFavorite"]) for r in mine] == [(plain, False), (family, True)]
        assert [r["id"] for r in family_only] == [family]
