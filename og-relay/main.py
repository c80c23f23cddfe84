"""
OG Relay Cloud Function

Fetches preview metadata for an Instagram post on behalf of a browser
client that cannot make the cross-origin request itself.

Strategies, tried in order until one returns something useful:
1. Instagram oEmbed endpoint
2. Direct HTML fetch
3. Reader proxy mirror (http and https origin variants)
4. Alternate mirror domain
5. Alternate mirror domain via the reader proxy

Returns: { ok, ogTitle, ogDesc, ogImage, text, source }

Does NOT:
- Cache results
- Authenticate callers or rate limit
"""

import functions_framework
import requests
import traceback
import os
import sys
import json
from typing import Optional

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.url_utils import (
    INVALID_URL_MESSAGE,
    DEFAULT_PROXY_HOST,
    DEFAULT_MIRROR_HOST,
    is_valid_instagram_url,
    normalize_ig_url,
    proxy_variants,
    to_dd_instagram,
)
from shared.og_utils import PLACEHOLDER_HTML, empty_result, extract_og_and_text, has_useful

# Configuration
PROXY_HOST = os.environ.get('OG_RELAY_PROXY_HOST', DEFAULT_PROXY_HOST)
MIRROR_HOST = os.environ.get('OG_RELAY_MIRROR_HOST', DEFAULT_MIRROR_HOST)
REQUEST_TIMEOUT = int(os.environ.get('OG_RELAY_TIMEOUT', '10'))

OEMBED_URL = 'https://www.instagram.com/oembed/'
RELAY_USER_AGENT = 'OGRelay/1.0'
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}


def try_oembed(post_url: str) -> Optional[dict]:
    """Fetch title/author/thumbnail from Instagram's public oEmbed endpoint."""
    try:
        response = requests.get(
            OEMBED_URL,
            params={'omitscript': 'true', 'url': post_url},
            headers={'User-Agent': RELAY_USER_AGENT},
            timeout=REQUEST_TIMEOUT
        )
        if not response.ok:
            print(f"oEmbed returned {response.status_code} for {post_url}")
            return None
        data = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        print(f"oEmbed error: {e}")
        return None

    if not isinstance(data, dict):
        return None

    title = str(data.get('title') or '')
    author = str(data.get('author_name') or '')
    thumbnail = str(data.get('thumbnail_url') or '')

    if not title:
        return None

    byline = f"By {author} — Instagram" if author else ''
    return {
        'ok': True,
        'ogTitle': title,
        'ogDesc': byline,
        'ogImage': thumbnail,
        'text': ' | '.join(part for part in [title, byline] if part),
        'source': 'oembed',
    }


def fetch_html(url: str) -> str:
    """
    Fetch raw markup with browser-like headers.

    Never raises: a non-2xx status or a transport failure yields the
    placeholder markup, which extracts to a non-useful result.
    """
    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.8',
    }

    try:
        response = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT, allow_redirects=True)
    except requests.exceptions.RequestException as e:
        print(f"Fetch failed for {url}: {e}")
        return PLACEHOLDER_HTML

    if not response.ok:
        print(f"Fetch returned {response.status_code} for {url}")
        return PLACEHOLDER_HTML

    return response.text


def fetch_and_extract(url: str, source: str) -> Optional[dict]:
    """Fetch a page and return its OG result tagged with source, if useful."""
    parsed = extract_og_and_text(fetch_html(url))
    if not has_useful(parsed):
        return None
    return {'ok': True, **parsed, 'source': source}


def first_useful(urls: list, source: str) -> Optional[dict]:
    for url in urls:
        result = fetch_and_extract(url, source)
        if result:
            return result
    return None


def try_direct(target: str) -> Optional[dict]:
    return fetch_and_extract(target, 'html')


def try_mirror(target: str) -> Optional[dict]:
    return first_useful(proxy_variants(target, PROXY_HOST), 'mirror')


def try_dd_instagram(target: str) -> Optional[dict]:
    dd_url = to_dd_instagram(target, MIRROR_HOST)
    if not dd_url:
        return None
    return fetch_and_extract(dd_url, 'ddinstagram')


def try_dd_mirror(target: str) -> Optional[dict]:
    dd_url = to_dd_instagram(target, MIRROR_HOST)
    if not dd_url:
        return None
    return first_useful(proxy_variants(dd_url, PROXY_HOST), 'dd-mirror')


def run_ladder(target: str) -> dict:
    """Try each strategy in order and return the first useful result."""
    for strategy in (try_oembed, try_direct, try_mirror, try_dd_instagram, try_dd_mirror):
        result = strategy(target)
        if result:
            return result

    return empty_result()


@functions_framework.http
def og_relay(request):
    """
    Main Cloud Function entry point.

    Expected query string:
        ?url=https://www.instagram.com/p/<id>/
    """
    # Handle CORS
    if request.method == 'OPTIONS':
        return ('', 204, dict(CORS_HEADERS))

    headers = {**CORS_HEADERS, 'Content-Type': 'application/json'}

    raw = str(request.args.get('url') or '').strip()
    if not is_valid_instagram_url(raw):
        return (json.dumps({
            'error': INVALID_URL_MESSAGE
        }), 400, headers)

    target = normalize_ig_url(raw)

    try:
        result = run_ladder(target)
        print(f"Relay result for {target}: {result['source']}")
        return (json.dumps(result), 200, headers)

    except Exception as e:
        print(f"Relay error: {e}")
        print(f"Full traceback: {traceback.format_exc()}")
        return (json.dumps({
            'error': str(e) or 'Relay error'
        }), 500, headers)
