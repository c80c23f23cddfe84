"""
Shared pytest fixtures for OG relay tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path
from bs4 import BeautifulSoup

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load Cloud Function module with a unique name at module load time
_og_relay_module = _load_module_from_path(
    'og_relay_main',
    PROJECT_ROOT / 'og-relay' / 'main.py'
)


# ============================================================================
# OG Relay Function Fixtures
# ============================================================================

@pytest.fixture
def og_relay_module():
    """Returns the loaded og-relay module (for patching strategies)."""
    return _og_relay_module


@pytest.fixture
def og_relay():
    """Returns main entry point from og-relay."""
    return _og_relay_module.og_relay


@pytest.fixture
def try_oembed():
    """Returns try_oembed function from og-relay."""
    return _og_relay_module.try_oembed


@pytest.fixture
def fetch_html():
    """Returns fetch_html function from og-relay."""
    return _og_relay_module.fetch_html


@pytest.fixture
def run_ladder():
    """Returns run_ladder function from og-relay."""
    return _og_relay_module.run_ladder


# ============================================================================
# Sample markup
# ============================================================================

@pytest.fixture
def sample_post_html():
    """Markup of an Instagram post page with Open Graph tags."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Instagram</title>
        <meta property="og:title" content="Jane on Instagram: &quot;Sunset&quot;">
        <meta content="42 likes, 3 comments - jane on June 1, 2024" property="og:description">
        <meta property="og:image" content="https://cdn.example.com/sunset.jpg">
        <style>body { color: red; }</style>
        <script>window.__data = {"secret": true};</script>
    </head>
    <body>
        <main><p>Sunset over the bay</p></main>
    </body>
    </html>
    """


@pytest.fixture
def login_wall_html():
    """Markup returned when Instagram hides the post behind its login wall."""
    return """
    <html>
    <head><script>requireLogin();</script></head>
    <body>Instagram</body>
    </html>
    """


@pytest.fixture
def empty_soup():
    """Returns empty BeautifulSoup."""
    return BeautifulSoup("", 'html.parser')


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, args=None, method='GET'):
            self.args = args or {}
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return None

    return MockRequest


@pytest.fixture
def oembed_response():
    """Sample Instagram oEmbed response for a post."""
    return {
        "version": "1.0",
        "title": "Sunset over the bay",
        "author_name": "jane",
        "author_url": "https://www.instagram.com/jane",
        "provider_name": "Instagram",
        "thumbnail_url": "https://cdn.example.com/thumb.jpg",
        "thumbnail_width": 640,
        "thumbnail_height": 640
    }
