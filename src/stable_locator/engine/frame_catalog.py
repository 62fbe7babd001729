"""
Frame Catalog - Enumerate every document context reachable from a page.

Walks the main document and every nested iframe, depth-first and in index
order within each parent. A frame that cannot be inspected (detached,
cross-origin restricted, navigating) contributes an empty subtree; it never
aborts the walk.
"""

import logging
from typing import AsyncIterator, List, Optional

from stable_locator.engine.models import FrameHandle
from stable_locator.interfaces.page import IPageCapability

logger = logging.getLogger(__name__)


class FrameCatalog:
    """
    Lazy, finite enumeration of frames.

    Usage:
        catalog = FrameCatalog(capability)
        async for frame in catalog.enumerate():
            print(frame.path, frame.depth)
    """

    def __init__(self, capability: IPageCapability):
        self._capability = capability

    async def enumerate(
        self,
        root: Optional[FrameHandle] = None,
    ) -> AsyncIterator[FrameHandle]:
        """
        Yield the root frame followed by all of its descendants.

        Uses an explicit stack so arbitrarily deep iframe nesting does not
        grow the call stack.

        Args:
            root: Frame to start from (defaults to the main frame)

        Yields:
            FrameHandle for each frame, root first
        """
        if root is None:
            root = FrameHandle.main(self._capability.main_frame())

        stack: List[FrameHandle] = [root]
        while stack:
            frame = stack.pop()
            yield frame

            children = await self._children(frame)
            # Reversed so the lowest index is popped first
            stack.extend(reversed(children))

    async def snapshot(self, root: Optional[FrameHandle] = None) -> List[FrameHandle]:
        """
        Materialize the catalog into a point-in-time list.

        Frames may detach after the snapshot is taken; consumers treat that
        as "not found" for the frame.
        """
        frames = [frame async for frame in self.enumerate(root)]
        logger.debug(f"Frame catalog: {len(frames)} frame(s): {[f.path for f in frames]}")
        return frames

    async def _children(self, frame: FrameHandle) -> List[FrameHandle]:
        """Direct iframe children of a frame, empty if it cannot be inspected."""
        try:
            count = await self._capability.iframe_count(frame.context)
        except Exception as e:
            logger.debug(f"Skipping subtree of {frame.path}: {e}")
            return []

        children = []
        for index in range(count):
            child = await self._child_at(frame, index)
            if child is not None:
                children.append(child)
        return children

    async def _child_at(self, frame: FrameHandle, index: int) -> Optional[FrameHandle]:
        try:
            context = await self._capability.iframe_at(frame.context, index)
        except Exception as e:
            logger.debug(f"Skipping iframe {index} of {frame.path}: {e}")
            return None
        return frame.child(context, index)