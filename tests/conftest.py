"""
Global test configuration for tvlisting.

This module provides the fake site, provider factory and sample program
fixtures shared by the test modules.
"""

import os
import tempfile
from pathlib import Path

import httpx
import pytest

# Keep the settings' filter directory out of the working tree
os.environ.setdefault(
    "FILTER_FILE_PATH",
    str(Path(tempfile.gettempdir()) / "tvlisting-tests" / "filters.csv"),
)

from tests.helpers import ICON_SIZE, ICONS_URL, LISTING_URL, FakeSite, build_sprite_bytes  # noqa: E402
from tvlisting.models import Channel, Movie, Program  # noqa: E402


@pytest.fixture
def sprite_bytes():
    return build_sprite_bytes()


@pytest.fixture
def fake_site(sprite_bytes):
    return FakeSite({ICONS_URL: httpx.Response(200, content=sprite_bytes)})


@pytest.fixture
def make_provider(fake_site):
    from tvlisting.services.tv_spielfilm_provider import TvSpielfilmProvider

    def _make(**overrides):
        options = {
            "listing_url": LISTING_URL,
            "icons_url": ICONS_URL,
            "icon_size": ICON_SIZE,
            "timeout_sec": 5,
            "transport": fake_site.transport,
        }
        options.update(overrides)
        return TvSpielfilmProvider(**options)

    return _make


@pytest.fixture
def sample_program():
    return Program([
        (Channel("ZDF"), Movie("Tagesschau")),
        (Channel("ARD"), Movie("Heute")),
    ])
