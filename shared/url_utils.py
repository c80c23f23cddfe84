"""
URL utilities for the OG relay.

Instagram post URLs arrive from browser clients in many shapes
(http/https, pasted with angle brackets, with or without trailing slash).
Mirrors are picky about the canonical form, so everything is normalized
before any upstream call is made.
"""

import re
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

INVALID_URL_MESSAGE = 'Provide a valid Instagram post URL.'

DEFAULT_PROXY_HOST = 'r.jina.ai'
DEFAULT_MIRROR_HOST = 'ddinstagram.com'

# Post and reel paths that mirrors expect to end in '/'
POST_PATH_PATTERNS = [
    re.compile(r'/p/[^/]+$'),
    re.compile(r'/reel/[^/]+$'),
]


def is_valid_instagram_url(raw: str) -> bool:
    """Check that a trimmed URL is http(s) and points at instagram.com."""
    if not raw:
        return False
    return bool(
        re.match(r'^https?://', raw, re.I) and
        re.search(r'instagram\.com/', raw, re.I)
    )


def normalize_ig_url(url: str) -> str:
    """
    Normalize an Instagram URL for upstream fetching.

    - Upgrades http:// to https://
    - Strips literal '<' and '>' characters
    - Adds a trailing slash to /p/<id> and /reel/<id> paths

    Examples:
        >>> normalize_ig_url('http://instagram.com/p/abc')
        'https://instagram.com/p/abc/'

        >>> normalize_ig_url('https://www.instagram.com/reel/xyz?igsh=1')
        'https://www.instagram.com/reel/xyz/?igsh=1'
    """
    normalized = re.sub(r'^http://', 'https://', url, flags=re.I)
    normalized = normalized.replace('<', '').replace('>', '')

    try:
        parts = urlsplit(normalized)
    except ValueError:
        return normalized

    path = parts.path
    if any(p.search(path) for p in POST_PATH_PATTERNS) and not path.endswith('/'):
        normalized = urlunsplit(parts._replace(path=path + '/'))

    return normalized


def strip_scheme(url: str) -> str:
    """Return host + path (+ query) with the http(s):// prefix removed."""
    return re.sub(r'^https?://', '', url, flags=re.I)


def proxy_variants(url: str, proxy_host: str = DEFAULT_PROXY_HOST) -> List[str]:
    """
    Build the reader-proxy URLs for a target.

    The proxy takes the full origin URL as its path, so the target is tried
    once assuming an http origin and once assuming https.
    """
    host_and_path = strip_scheme(url)
    return [
        f'https://{proxy_host}/http://{host_and_path}',
        f'https://{proxy_host}/https://{host_and_path}',
    ]


def to_dd_instagram(ig_url: str, mirror_host: str = DEFAULT_MIRROR_HOST) -> Optional[str]:
    """Map an instagram.com URL onto the mirror host, keeping path and query."""
    try:
        parts = urlsplit(ig_url)
    except ValueError:
        return None

    query = f'?{parts.query}' if parts.query else ''
    return f'https://{mirror_host}{parts.path}{query}'
