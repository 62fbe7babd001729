"""
Uniqueness Oracle - How many elements does a selector match?
"""

import logging
from typing import Any

from stable_locator.engine.models import FrameHandle
from stable_locator.exceptions import SelectorInvalidError
from stable_locator.interfaces.page import IPageCapability

logger = logging.getLogger(__name__)


class UniquenessOracle:
    """
    Count selector matches in a frame without ever raising.

    A selector the page cannot parse, or a frame that went away, counts as
    zero matches so the candidate is simply rejected.
    """

    def __init__(self, capability: IPageCapability):
        self._capability = capability

    async def count(self, frame: FrameHandle, selector: str) -> int:
        try:
            return await self._capability.count_matches(frame.context, selector)
        except SelectorInvalidError as e:
            logger.debug(f"Invalid selector rejected: {e.selector}")
        except Exception as e:
            logger.debug(f"Count failed for {selector!r} in {frame.path}: {e}")
        return 0

    async def is_unique(self, frame: FrameHandle, selector: str) -> bool:
        return await self.count(frame, selector) == 1

    async def selects(self, frame: FrameHandle, selector: str, element: Any) -> bool:
        """Check that the selector matches exactly one element and that it is ``element``."""
        if not await self.is_unique(frame, selector):
            return False
        try:
            return await self._capability.is_same_element(frame.context, selector, element)
        except Exception as e:
            logger.debug(f"Identity check failed for {selector!r} in {frame.path}: {e}")
            return False
