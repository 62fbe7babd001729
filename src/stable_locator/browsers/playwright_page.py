"""
Playwright Page Capability - Implementation of IPageCapability using Playwright.

Frame contexts are the Playwright ``Page`` for the main document and
``FrameLocator`` objects for nested iframes. Both expose the same locator
factories, so every query below works unchanged at any depth. Element
handles are single-element ``Locator`` objects.
"""

import asyncio
import logging
from typing import Any, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import FrameLocator

from stable_locator.exceptions.browser import (
    FrameAccessError,
    FrameTimeoutError,
    SelectorInvalidError,
)
from stable_locator.interfaces.page import ElementQuery, IPageCapability, QueryKind

logger = logging.getLogger(__name__)

# Fragments of Playwright error messages raised for unparsable selectors
_SELECTOR_ERROR_MARKERS = (
    "is not a valid selector",
    "Unexpected token",
    "Unknown engine",
    "Malformed selector",
    "Failed to parse selector",
    "Unsupported token",
)

ABSENCE_POLL_INTERVAL_MS = 100


def _is_selector_error(error: Exception) -> bool:
    message = str(error)
    return any(marker in message for marker in _SELECTOR_ERROR_MARKERS)


class PlaywrightPageCapability(IPageCapability):
    """
    Playwright implementation of IPageCapability.

    Example:
        >>> capability = PlaywrightPageCapability(page)
        >>> engine = LocatorEngine(capability)
    """

    def __init__(self, page: Any, frame_timeout_ms: int = 2000):
        """
        Initialize the capability.

        Args:
            page: Playwright Page object
            frame_timeout_ms: Bound on reaching an iframe's document while
                enumerating frames
        """
        self._page = page
        self.frame_timeout_ms = frame_timeout_ms

    def main_frame(self) -> Any:
        return self._page

    async def count_matches(self, frame: Any, selector: str) -> int:
        """Count selector matches, mapping parse failures to SelectorInvalidError."""
        try:
            return await frame.locator(selector).count()
        except PlaywrightError as e:
            if _is_selector_error(e):
                raise SelectorInvalidError(f"Invalid selector: {e.message}", selector=selector) from e
            raise FrameAccessError(f"Could not count {selector!r}: {e.message}") from e

    async def count_query(self, frame: Any, query: ElementQuery) -> int:
        return await self._locator(frame, query).count()

    async def locate(self, frame: Any, query: ElementQuery) -> List[Any]:
        locator = self._locator(frame, query)
        count = await locator.count()
        return [locator.nth(i) for i in range(count)]

    async def evaluate(self, target: Any, script: str, arg: Any = None) -> Any:
        return await target.evaluate(script, arg)

    async def iframe_count(self, frame: Any) -> int:
        try:
            return await asyncio.wait_for(
                frame.locator("iframe").count(),
                timeout=self.frame_timeout_ms / 1000,
            )
        except asyncio.TimeoutError as e:
            raise FrameTimeoutError(
                "Timed out reaching frame document", timeout_ms=self.frame_timeout_ms
            ) from e
        except PlaywrightError as e:
            raise FrameAccessError(f"Frame is not reachable: {e.message}") from e

    async def iframe_at(self, frame: Any, index: int) -> Any:
        try:
            return frame.frame_locator("iframe").nth(index)
        except PlaywrightError as e:
            raise FrameAccessError(f"Could not enter iframe {index}: {e.message}") from e

    async def wait_visible(self, frame: Any, query: ElementQuery, timeout_ms: int) -> bool:
        try:
            await self._locator(frame, query).first.wait_for(state="visible", timeout=timeout_ms)
            return True
        except PlaywrightError as e:
            logger.debug(f"{query.describe()} not visible: {e.message.splitlines()[0]}")
            return False

    async def wait_absent(self, frame: Any, query: ElementQuery, timeout_ms: int) -> bool:
        """Poll the match count until it reaches zero or the timeout expires."""
        locator = self._locator(frame, query)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000
        while True:
            try:
                if await locator.count() == 0:
                    return True
            except PlaywrightError as e:
                logger.debug(f"Count of {query.describe()} failed: {e.message}")
                return False
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(ABSENCE_POLL_INTERVAL_MS / 1000)

    async def is_visible(self, element: Any) -> bool:
        return await element.is_visible()

    async def lookup_ref(self, ref: str) -> Optional[Any]:
        """Resolve a ref captured from Playwright's AI snapshot (``aria-ref=``)."""
        locator = self._page.locator(f"aria-ref={ref}")
        if await locator.count() < 1:
            return None
        return locator.first

    async def contains_element(self, frame: Any, element: Any) -> bool:
        """Compare the element's owner frame with the frame behind the context."""
        try:
            handle = await element.element_handle(timeout=self.frame_timeout_ms)
            owner = await handle.owner_frame()
            document = await self._document_frame(frame)
        except PlaywrightError as e:
            raise FrameAccessError(f"Could not compare frames: {e.message}") from e
        return owner is not None and owner == document

    async def is_same_element(self, frame: Any, selector: str, element: Any) -> bool:
        try:
            handle = await element.element_handle(timeout=self.frame_timeout_ms)
            return await frame.locator(selector).evaluate(
                "(node, target) => node === target",
                handle,
                timeout=self.frame_timeout_ms,
            )
        except PlaywrightError as e:
            logger.debug(f"Identity check of {selector!r} failed: {e.message.splitlines()[0]}")
            return False

    async def _document_frame(self, frame: Any) -> Any:
        """Playwright Frame behind a Page or FrameLocator context."""
        if isinstance(frame, FrameLocator):
            iframe = await frame.owner.element_handle(timeout=self.frame_timeout_ms)
            return await iframe.content_frame()
        return frame.main_frame

    def _locator(self, frame: Any, query: ElementQuery) -> Any:
        if query.kind == QueryKind.ROLE:
            options = {}
            if query.name is not None:
                options.update(name=query.name, exact=query.exact)
            if query.include_hidden:
                options["include_hidden"] = True
            return frame.get_by_role(query.value, **options)
        if query.kind == QueryKind.TEXT:
            return frame.get_by_text(query.value, exact=query.exact)
        return frame.locator(query.value)
