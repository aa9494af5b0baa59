"""
Pytest configuration and shared fixtures.

The app runs on the testing config (in-memory SQLite, in-process budget) and
the provider client talks to a FakeSession instead of the network.
"""

import pytest
import requests

from app import create_app
from models import db, FamilyGroup, FamilyGroupMember, Recipe, RecipeIngredient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason='OK', invalid_json=False):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.reason = reason
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError('No JSON object could be decoded')
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session.

    Routes map a path fragment to a FakeResponse or an exception instance;
    the first matching fragment wins. Every call is recorded.
    """

    def __init__(self):
        self.routes = []
        self.calls = []

    def add(self, fragment, response):
        self.routes.append((fragment, response))

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'params': dict(params or {}), 'headers': headers, 'timeout': timeout})
        for fragment, response in self.routes:
            if fragment in url:
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404, {'message': 'not found'}, reason='Not Found')


def spoon_recipe(recipe_id, title='Provider Dish', **extra):
    """Minimal provider recipe payload."""
    raw = {
        'id': recipe_id,
        'title': title,
        'summary': f'<b>{title}</b> is tasty.',
        'readyInMinutes': 30,
        'servings': 4,
        'image': f'https://img.example.com/{recipe_id}.jpg',
        'healthScore': 50,
        'cuisines': [],
        'dishTypes': ['main course'],
        'diets': [],
        'extendedIngredients': [],
        'analyzedInstructions': [],
    }
    raw.update(extra)
    return raw


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def app(fake_session):
    app = create_app('testing', gateway_session=fake_session)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def gateway(app):
    return app.extensions['spoonacular']


@pytest.fixture
def family(app):
    """Group with alice (admin) and bob; carol is not a member."""
    group = FamilyGroup(name='The Smiths')
    group.members.append(FamilyGroupMember(user_id='alice', role='admin'))
    group.members.append(FamilyGroupMember(user_id='bob'))
    db.session.add(group)
    db.session.commit()
    return group


@pytest.fixture
def make_recipe(app):
    """Factory for stored recipes: make_recipe('Soup', ingredients=[('onion', '1', '')])."""
    def _make(title, user_id='alice', visibility='public', status='published',
              ingredients=(), **fields):
        recipe = Recipe(title=title, user_id=user_id, visibility=visibility, status=status,
                        tags=[], instructions=[], **fields)
        for position, (name, amount, unit) in enumerate(ingredients):
            recipe.ingredients.append(RecipeIngredient(
                position=position, name=name, amount=amount, unit=unit))
        db.session.add(recipe)
        db.session.commit()
        return recipe
    return _make


@pytest.fixture
def connection_error():
    return requests.ConnectionError('connection refused')


@pytest.fixture
def provider_recipe():
    return spoon_recipe


@pytest.fixture
def respond():
    """Shortcut for building FakeResponse objects in tests."""
    return FakeResponse
