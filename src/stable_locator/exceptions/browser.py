"""
Browser and page related exceptions.

Per-frame and per-candidate failures (FrameAccessError, SelectorInvalidError,
FrameTimeoutError) are absorbed by the engine. ElementNotFoundError and
MultipleMatchError describe whole-operation outcomes and reach the caller.
"""

from typing import List, Optional

from stable_locator.exceptions.base import StableLocatorError


class BrowserError(StableLocatorError):
    """Base exception for browser-related errors."""
    pass


class BrowserLaunchError(BrowserError):
    """Failed to launch the browser."""
    pass


class PageError(BrowserError):
    """Base exception for page-related errors."""
    pass


class FrameAccessError(PageError):
    """
    A frame became unreachable mid-traversal.
    
    Raised by page capabilities when a frame is detached, cross-origin
    restricted, or navigating. The frame catalog treats the subtree as empty.
    """
    
    def __init__(self, message: str, frame_path: Optional[str] = None):
        super().__init__(message, {"frame_path": frame_path})
        self.frame_path = frame_path


class SelectorInvalidError(PageError):
    """
    A selector is not a valid expression for the page capability.
    
    The uniqueness oracle counts such selectors as zero matches.
    """
    
    def __init__(self, message: str, selector: str):
        super().__init__(message, {"selector": selector})
        self.selector = selector


class ElementNotFoundError(PageError):
    """
    Element not found on the page.
    
    Raised when direct lookup and the cross-frame role search both fail,
    or when the element to inspect is no longer attached.
    """
    
    def __init__(self, message: str, selector: Optional[str] = None):
        super().__init__(message, {"selector": selector})
        self.selector = selector


class MultipleMatchError(PageError):
    """
    A search that requires a single match found several.
    
    Attributes:
        frame_paths: Frame path of every match, in catalog order
    """
    
    def __init__(self, message: str, frame_paths: List[str]):
        super().__init__(message, {"frame_paths": frame_paths})
        self.frame_paths = frame_paths


class FrameTimeoutError(PageError):
    """
    A per-frame check exceeded its bound.
    
    Never surfaced individually: folded into ``found=False`` for the frame.
    """
    
    def __init__(self, message: str, timeout_ms: int, frame_path: Optional[str] = None):
        super().__init__(message, {"timeout_ms": timeout_ms, "frame_path": frame_path})
        self.timeout_ms = timeout_ms
        self.frame_path = frame_path
