"""
External Content Gateway

HTTP client for the Spoonacular recipe API. Every call is checked against
the rate budget first; responses are normalized into UnifiedRecipe objects
before leaving this module.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from constants import SEARCH_SORT_KEYS, USER_AGENT, VALID_SORT_DIRECTIONS
from .errors import (
    UpstreamError,
    UpstreamNotFound,
    UpstreamRateLimited,
    UpstreamUnavailable,
    ValidationFailed,
)
from .normalize import normalize_recipe
from .unified import RecipeRef, UnifiedRecipe

logger = logging.getLogger(__name__)

MAX_PROVIDER_PAGE = 100
MAX_RANDOM_BATCH = 100


@dataclass
class SearchFilters:
    """Optional search filters shared by local and provider searches."""
    cuisine: Optional[str] = None
    diet: Optional[str] = None
    max_ready_time: Optional[int] = None
    sort: Optional[str] = None
    sort_direction: Optional[str] = None

    def validate(self):
        if self.sort is not None and self.sort not in SEARCH_SORT_KEYS:
            raise ValidationFailed(f'Unknown sort key: {self.sort}', {'sort': self.sort})
        if self.sort_direction is not None and self.sort_direction not in VALID_SORT_DIRECTIONS:
            raise ValidationFailed(
                f'Unknown sort direction: {self.sort_direction}',
                {'sort_direction': self.sort_direction},
            )
        if self.max_ready_time is not None and self.max_ready_time < 0:
            raise ValidationFailed('max_ready_time must not be negative',
                                   {'max_ready_time': self.max_ready_time})
        return self


@dataclass
class FetchOutcome:
    """Result of a single fetch: exactly one of recipe or error is set."""
    key: str
    recipe: Optional[UnifiedRecipe] = None
    error: Optional[UpstreamError] = None

    @property
    def ok(self):
        return self.error is None


class SpoonacularGateway:
    """Budget-checked client for the Spoonacular API."""

    def __init__(self, api_key, base_url, budget, session=None, timeout=10):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.budget = budget
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, path, params=None):
        """GET a provider endpoint and return the decoded JSON body.

        The budget slot is reserved before the request and refunded when
        the request fails in any way.
        """
        if not self.api_key:
            raise UpstreamUnavailable('Recipe provider is not configured')

        self.budget.acquire()

        query = dict(params or {})
        query['apiKey'] = self.api_key
        url = f'{self.base_url}{path}'
        headers = {'Accept': 'application/json', 'User-Agent': USER_AGENT}

        try:
            response = self.session.get(url, params=query, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            self.budget.release()
            logger.warning("Provider request to %s failed: %s", path, e)
            raise UpstreamUnavailable(f'Recipe provider unreachable: {e}') from e

        if response.status_code == 429:
            self.budget.release()
            logger.warning("Provider rate limited request to %s", path)
            raise UpstreamRateLimited('Recipe provider rate limit reached')
        if response.status_code == 404:
            self.budget.release()
            raise UpstreamNotFound('Recipe not found at provider', {'path': path})
        if not 200 <= response.status_code < 300:
            self.budget.release()
            logger.warning("Provider returned %s for %s", response.status_code, path)
            raise UpstreamUnavailable(
                f'Recipe provider error: {response.reason or response.status_code}',
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            self.budget.release()
            logger.warning("Provider returned an undecodable body for %s", path)
            raise UpstreamUnavailable('Recipe provider returned invalid JSON') from e

    def search(self, query, filters=None, page=None):
        """Search provider recipes. Returns (recipes, total_results)."""
        filters = filters or SearchFilters()
        params = {
            'query': query,
            'addRecipeInformation': 'true',
            'fillIngredients': 'true',
            'number': min(page.limit, MAX_PROVIDER_PAGE) if page else 10,
            'offset': page.offset if page else 0,
        }
        if filters.sort:
            params['sort'] = SEARCH_SORT_KEYS[filters.sort]
        if filters.sort_direction:
            params['sortDirection'] = filters.sort_direction
        if filters.cuisine:
            params['cuisine'] = filters.cuisine
        if filters.diet:
            params['diet'] = filters.diet
        if filters.max_ready_time:
            params['maxReadyTime'] = filters.max_ready_time

        data = self._request('/recipes/complexSearch', params)
        recipes = [normalize_recipe(raw) for raw in data.get('results') or []]
        return recipes, int(data.get('totalResults') or 0)

    def fetch_by_id(self, external_id, include_nutrition=False):
        """Fetch one provider recipe by its numeric id."""
        data = self._request(
            f'/recipes/{external_id}/information',
            {'includeNutrition': 'true' if include_nutrition else 'false'},
        )
        return normalize_recipe(data)

    def try_fetch_by_id(self, external_id, include_nutrition=False):
        """Like fetch_by_id, but returns a FetchOutcome instead of raising."""
        key = RecipeRef.external(external_id).key
        try:
            return FetchOutcome(key, recipe=self.fetch_by_id(external_id, include_nutrition))
        except UpstreamError as e:
            return FetchOutcome(key, error=e)

    def random_batch(self, count, tag_hint=None):
        """Fetch up to count random recipes, optionally narrowed by tags."""
        params = {'number': max(1, min(count, MAX_RANDOM_BATCH))}
        if tag_hint:
            params['tags'] = tag_hint
        data = self._request('/recipes/random', params)
        return [normalize_recipe(raw) for raw in data.get('recipes') or []]

    def status(self):
        return self.budget.status()
