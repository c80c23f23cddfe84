"""Shared utilities for the OG relay."""

from .url_utils import (
    INVALID_URL_MESSAGE,
    DEFAULT_PROXY_HOST,
    DEFAULT_MIRROR_HOST,
    is_valid_instagram_url,
    normalize_ig_url,
    strip_scheme,
    proxy_variants,
    to_dd_instagram,
)

from .og_utils import (
    MAX_TEXT_LENGTH,
    PLACEHOLDER_TEXT,
    PLACEHOLDER_HTML,
    empty_result,
    get_meta_content,
    extract_text,
    extract_og_and_text,
    has_useful,
)

__all__ = [
    # URL utilities
    'INVALID_URL_MESSAGE',
    'DEFAULT_PROXY_HOST',
    'DEFAULT_MIRROR_HOST',
    'is_valid_instagram_url',
    'normalize_ig_url',
    'strip_scheme',
    'proxy_variants',
    'to_dd_instagram',
    # Open Graph utilities
    'MAX_TEXT_LENGTH',
    'PLACEHOLDER_TEXT',
    'PLACEHOLDER_HTML',
    'empty_result',
    'get_meta_content',
    'extract_text',
    'extract_og_and_text',
    'has_useful',
]
