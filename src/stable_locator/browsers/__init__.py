"""
Browsers module - Playwright adapters for the resolution engine.
"""

from stable_locator.browsers.playwright_page import PlaywrightPageCapability
from stable_locator.browsers.playwright_browser import PlaywrightBrowser

__all__ = [
    "PlaywrightPageCapability",
    "PlaywrightBrowser",
]
