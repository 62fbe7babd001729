"""
Stable Locator - Element resolution and stable selector synthesis for browser automation.

Resolves possibly stale element references across nested iframes and turns
the live element into a ranked list of selectors that each match exactly one
element, so recorded scripts keep working after the page changes.

Example:
    >>> from stable_locator import LocatorEngine, ElementReference
    >>> from stable_locator.browsers import PlaywrightPageCapability
    >>> engine = LocatorEngine(PlaywrightPageCapability(page))
    >>> resolved, selectors = await engine.locate_and_synthesize(
    ...     ElementReference(role="button", accessible_name="Sign in")
    ... )
"""

__version__ = "0.1.0"

# Public API exports
from stable_locator.engine.locator_engine import LocatorEngine, TextMatchType
from stable_locator.engine.models import (
    CandidateSelector,
    ElementReference,
    FrameSearchReport,
    ResolvedElement,
    VisibilityResult,
)
from stable_locator.config.settings import Settings

__all__ = [
    "LocatorEngine",
    "TextMatchType",
    "CandidateSelector",
    "ElementReference",
    "FrameSearchReport",
    "ResolvedElement",
    "VisibilityResult",
    "Settings",
    "__version__",
]
