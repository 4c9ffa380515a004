from __future__ import annotations

import pytest
from flask import has_app_context
from flask_jwt_extended import create_access_token

from recipebook import create_app
from recipebook.errors import NotFound
from recipebook.extensions import db
from recipebook.models import User
from recipebook.services.country_cache import CountryCache
from recipebook.services.types import RecipeDetail

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'SECRET_KEY': 'test-secret-key-with-enough-length-for-hmac',
    'JWT_SECRET_KEY': 'test-jwt-secret-key-with-enough-length-for-hmac',
    'CATALOG_API_KEY': 'test-key',
    'AUTO_CREATE_TABLES': True,
}


RECIPE_BODY = {
    'title': "Grandma's bread",
    'readyInMinutes': 90,
    'servings': 4,
    'instructions': ["Mix.", "Bake."],
    'ingredients': ["2 cups Flour", "1 tsp Salt"],
}


def create_local_recipe(client, headers, **overrides):
    body = dict(RECIPE_BODY, **overrides)
    response = client.post('/api/recipes', json=body, headers=headers)
    assert response.status_code == 201
    return response.get_json()['recipe_id']


def catalog_recipe(recipe_id, title=None, servings=2, ingredients=None, instructions=None):
    return RecipeDetail(
        id=recipe_id,
        title=title or f"Catalog recipe {recipe_id}",
        ready_in_minutes=30,
        image=f"https://img.example/{recipe_id}.jpg",
        vegan=False,
        vegetarian=True,
        gluten_free=False,
        is_external=True,
        popularity=10,
        servings=servings,
        ingredients=ingredients if ingredients is not None else ["1 cup rice", "2 tbsp olive oil"],
        instructions=instructions if instructions is not None else ["Boil the rice.", "Add the oil."],
    )


class FakeCatalog:
    """In-memory stand-in for CatalogClient"""

    def __init__(self, recipes=None, random_ids=(1, 2, 3)):
        self.recipes = {str(r.id): r for r in (recipes or [])}
        for recipe_id in random_ids:
            self.recipes.setdefault(str(recipe_id), catalog_recipe(recipe_id))
        self.random_ids = list(random_ids)
        self.search_calls = []
        self.lookups = []

    def add(self, recipe):
        self.recipes[str(recipe.id)] = recipe

    def lookup(self, recipe_id):
        self.lookups.append(str(recipe_id))
        if str(recipe_id) not in self.recipes:
            raise NotFound("Recipe not found")
        return self.recipes[str(recipe_id)]

    def search(self, query, limit=5, cuisine=None, diet=None, intolerances=None):
        self.search_calls.append({'query': query, 'limit': limit, 'cuisine': cuisine,
                                  'diet': diet, 'intolerances': intolerances})
        return [r.summary() for r in self.recipes.values()][:5]

    def random_sample(self, count):
        return [self.recipes[str(i)].summary() for i in self.random_ids[:count]]

    def exists(self, recipe_id):
        return str(recipe_id) in self.recipes


@pytest.fixture
def catalog():
    return FakeCatalog(recipes=[catalog_recipe(99, title="Shakshuka", servings=4)])


@pytest.fixture
def app(catalog):
    app = create_app(TEST_CONFIG)
    app.catalog_client = catalog
    app.country_cache = CountryCache(lambda: ["France", "Israel", "Japan"])
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def make_user(app):
    counter = {'n': 0}

    def _create(username):
        counter["n"] += 1
        user = User(
            username=username or f"user{counter['n']}",
            email=f"user{counter['n']}@example.com",
            firstname="Test",
            lastname="User",
            country="Israel",
        )
        user.set_password("pass1!")
        db.session.add(user)
        db.session.commit()
        return user.user_id

    def _make_user(username=None):
        if has_app_context():
            return _create(username)
        with app.app_context():
            return _create(username)

    return _make_user


@pytest.fixture
def auth_headers(app):
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {'Authorization': f'Bearer {token}'}

    return _headers
