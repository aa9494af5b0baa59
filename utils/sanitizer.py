"""
Input Sanitization Module

Cleans user-authored text and externally fetched markup before it is stored
or returned. Everything leaves here as plain text: markup is stripped rather
than escaped, since the API returns JSON and escaping is the renderer's job.
"""

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')


def strip_markup(text):
    """
    Remove HTML tags and decode entities, returning plain text.

    Args:
        text: HTML fragment (can be None)

    Returns:
        Plain text with surrounding whitespace removed
    """
    if not text:
        return ''
    if not isinstance(text, str):
        text = str(text)
    if '<' not in text and '&' not in text:
        return text.strip()
    return BeautifulSoup(text, 'html.parser').get_text().strip()


def truncate_text(text, max_length):
    """
    Shorten text to max_length, cutting back to the last whitespace boundary
    and appending an ellipsis. Text that already fits is returned unchanged.
    """
    if len(text) <= max_length:
        return text
    clipped = text[:max_length]
    clipped = re.sub(r'\s+\S*$', '', clipped)
    return clipped + '...'


def sanitize_text(text, max_length=10000):
    """
    Sanitize free text for storage.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Plain text without markup or control characters, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = _CONTROL_CHARS.sub('', text)
    text = strip_markup(text)

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_url(url):
    """
    Sanitize a URL by rejecting dangerous schemes.

    Prevents javascript:, data:, vbscript:, and other dangerous URL schemes
    that could execute code when used in href or src attributes.

    Args:
        url: The URL to validate (can be None)

    Returns:
        The URL if safe, empty string if unsafe or invalid
    """
    if not url:
        return ''

    if not isinstance(url, str):
        return ''

    url = url.strip()

    try:
        parsed = urlparse(url)
    except ValueError:
        return ''

    # Only allow http and https
    if parsed.scheme.lower() not in ('http', 'https'):
        return ''

    url_lower = url.lower()
    for dangerous in ('javascript:', 'data:', 'vbscript:'):
        if dangerous in url_lower:
            return ''

    return url


def sanitize_recipe_title(title, max_length=200):
    """
    Sanitize a recipe title for storage and display.

    Args:
        title: The recipe title to sanitize
        max_length: Maximum allowed length (default 200)

    Returns:
        Sanitized title, or '' if nothing usable remains
    """
    if not title:
        return ''

    title = sanitize_text(title, max_length=max_length * 2)

    # Collapse multiple spaces
    title = re.sub(r'\s+', ' ', title).strip()

    if len(title) > max_length:
        title = title[:max_length - 3] + '...'

    return title


def sanitize_item_name(text, max_length=200):
    """
    Sanitize a single ingredient or grocery item name.

    Internal whitespace is collapsed but casing is kept, since the first-seen
    casing is what a consolidated list shows.
    """
    if not text:
        return ''

    text = sanitize_text(text, max_length=max_length)
    return re.sub(r'\s+', ' ', text).strip()
