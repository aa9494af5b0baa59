"""
Source-Unified Search

Searches local recipes and the provider together and returns one page of
unified recipes. Mixed pages blend a fixed local share with provider
results; their totals are approximate and flagged as such.
"""

import logging
import random

from constants import DEFAULT_EXTERNAL_QUERY, VALID_SEARCH_SOURCES
from .errors import UpstreamError, UpstreamUnavailable, ValidationFailed
from .favorites import mark_favorites
from .gateway import SearchFilters
from .store import search_local
from .unified import PageRequest, from_local, paging_block

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_SHARE = 6


def _local_page(query, filters, page, caller_id):
    rows, total = search_local(query, filters, page, caller_id)
    return [from_local(row, include_content=False) for row in rows], total


def _external_page(gateway, query, filters, page):
    if gateway is None:
        raise UpstreamUnavailable('Recipe provider is not configured')
    return gateway.search(query or DEFAULT_EXTERNAL_QUERY, filters, page)


def search_recipes(query, filters=None, page=None, caller_id=None, source='all',
                   gateway=None, rng=None, local_share=DEFAULT_LOCAL_SHARE,
                   max_page_size=50):
    """
    Search recipes across sources.

    Args:
        query: Free-text query ('' matches everything)
        filters: SearchFilters (cuisine, diet, max ready time, sort)
        page: PageRequest; limit is capped at max_page_size
        caller_id: Viewing user, widens local visibility and marks favorites
        source: 'all', 'local' or 'external'
        gateway: SpoonacularGateway used for provider results
        rng: random.Random used to shuffle mixed pages

    Returns:
        dict with items, paging and source_breakdown
    """
    if source not in VALID_SEARCH_SOURCES:
        raise ValidationFailed(f'Unknown source: {source}', {'source': source})
    page = (page or PageRequest()).validate(max_page_size)
    filters = (filters or SearchFilters()).validate()
    query = (query or '').strip()

    if source == 'local':
        items, total = _local_page(query, filters, page, caller_id)
        breakdown = {'local': len(items), 'external': 0}
        paging = paging_block(page, total)

    elif source == 'external':
        # Provider errors propagate when the caller asked for provider results only
        items, total = _external_page(gateway, query, filters, page)
        breakdown = {'local': 0, 'external': len(items)}
        paging = paging_block(page, total)

    else:
        items, paging, breakdown = _mixed_page(
            query, filters, page, caller_id, gateway, rng or random.Random(), local_share)

    mark_favorites(caller_id, items)
    return {
        'items': items,
        'paging': paging,
        'source_breakdown': breakdown,
    }


def _mixed_page(query, filters, page, caller_id, gateway, rng, local_share):
    local_limit = min(local_share, page.limit)
    external_limit = page.limit - local_limit

    # Each source is paged by its own share of the page size
    local_page = PageRequest(limit=local_limit, offset=page.index * local_limit)
    local_items, local_total = _local_page(query, filters, local_page, caller_id)

    breakdown = {'local': len(local_items), 'external': 0}
    external_items, external_total = [], 0
    if external_limit > 0:
        external_page = PageRequest(limit=external_limit, offset=page.index * external_limit)
        try:
            external_items, external_total = _external_page(gateway, query, filters, external_page)
        except UpstreamError as e:
            # Degrade to local results rather than failing the whole page
            logger.warning("External search failed, returning local results only: %s", e)
            breakdown['external_error'] = e.code
        breakdown['external'] = len(external_items)

    items = local_items + external_items
    rng.shuffle(items)
    items = items[:page.limit]

    total = local_total + external_total
    return items, paging_block(page, total, exact=False), breakdown
