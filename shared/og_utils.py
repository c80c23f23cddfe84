"""
Open Graph extraction utilities for the OG relay.

Turns raw page markup (direct fetch or mirror) into a retrieval result:
    ogTitle, ogDesc, ogImage: from og:* meta tags ('' when missing)
    text: visible text, whitespace collapsed, max 4000 chars

A result is only worth returning to the client if it is "useful"
(see has_useful). Instagram's login wall and our own placeholder markup
both reduce to the bare word 'Instagram', which does not count.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

MAX_TEXT_LENGTH = 4000

PLACEHOLDER_TEXT = 'Instagram'

# Returned by fetch_html in place of a failed response
PLACEHOLDER_HTML = f'<html><body>{PLACEHOLDER_TEXT}</body></html>'

OG_KEYS = {
    'ogTitle': 'og:title',
    'ogDesc': 'og:description',
    'ogImage': 'og:image',
}


def empty_result() -> dict:
    """Result returned when every strategy came back empty."""
    return {
        'ok': True,
        'ogTitle': '',
        'ogDesc': '',
        'ogImage': '',
        'text': PLACEHOLDER_TEXT,
        'source': 'empty',
    }


def get_meta_content(soup: BeautifulSoup, key: str) -> str:
    """
    Find the content of an Open Graph meta tag.

    Accepts the key in either a property= or a name= attribute, compared
    case-insensitively. Attribute order in the markup does not matter.
    """
    pattern = re.compile(rf'^{re.escape(key)}$', re.I)

    for attr in ('property', 'name'):
        for tag in soup.find_all('meta', attrs={attr: pattern}):
            content = (tag.get('content') or '').strip()
            if content:
                return content

    return ''


def extract_text(soup: BeautifulSoup) -> str:
    """Visible text of the page with scripts and styles removed."""
    for element in soup.find_all(['script', 'style']):
        element.decompose()

    text = soup.get_text(separator=' ')
    text = re.sub(r'\s+', ' ', text).strip()
    return text[:MAX_TEXT_LENGTH]


def extract_og_and_text(html: Optional[str] = '') -> dict:
    """
    Extract Open Graph fields and a plain-text excerpt from markup.

    Returns:
        dict with ogTitle, ogDesc, ogImage and text (all strings)
    """
    soup = BeautifulSoup(html or '', 'html.parser')

    result = {field: get_meta_content(soup, key) for field, key in OG_KEYS.items()}
    # Text last: extract_text mutates the soup
    result['text'] = extract_text(soup)
    return result


def has_useful(parsed: Optional[dict]) -> bool:
    """
    Check whether a retrieval result is worth returning.

    Useful when there is an OG title or description, or any text
    other than the bare placeholder.
    """
    if not parsed:
        return False

    if parsed.get('ogTitle') or parsed.get('ogDesc'):
        return True

    text = parsed.get('text')
    return bool(text) and text != PLACEHOLDER_TEXT
