"""
Pytest configuration and fixtures.
"""

import pytest

from stable_locator.config import LocatorSettings, reset_settings
from tests.fakes import FakeFrame, FakePageCapability


@pytest.fixture
def locator_settings():
    """Locator settings with a short per-frame bound for fast tests."""
    return LocatorSettings(per_frame_timeout_ms=200)


@pytest.fixture
def nested_page():
    """
    A page with two top-level iframes, the first holding one more iframe.

        main
        ├── iframe-0-0
        │   └── iframe-1-0
        └── iframe-0-1
    """
    deep = FakeFrame("deep")
    first = FakeFrame("first", children=[deep])
    second = FakeFrame("second")
    main = FakeFrame("main", children=[first, second])
    return FakePageCapability(main)


@pytest.fixture(autouse=True)
def clean_settings():
    """Reset the global settings singleton around each test."""
    reset_settings()
    yield
    reset_settings()
