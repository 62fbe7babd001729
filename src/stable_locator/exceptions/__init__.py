"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Stable Locator,
providing clear error types for different failure scenarios.
"""

from stable_locator.exceptions.base import (
    StableLocatorError,
    ConfigurationError,
)
from stable_locator.exceptions.browser import (
    BrowserError,
    BrowserLaunchError,
    PageError,
    FrameAccessError,
    SelectorInvalidError,
    ElementNotFoundError,
    MultipleMatchError,
    FrameTimeoutError,
)

__all__ = [
    # Base exceptions
    "StableLocatorError",
    "ConfigurationError",
    # Browser exceptions
    "BrowserError",
    "BrowserLaunchError",
    "PageError",
    "FrameAccessError",
    "SelectorInvalidError",
    "ElementNotFoundError",
    "MultipleMatchError",
    "FrameTimeoutError",
]
