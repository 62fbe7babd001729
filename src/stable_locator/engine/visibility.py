"""
Parallel Visibility Checker - Run one bounded check per frame, concurrently.

Every frame of a catalog snapshot gets its own task with a fixed timeout, so a
single stuck or detaching frame cannot hold up the others. Timeouts and errors
fold into ``found=False`` for that frame.

Two aggregation modes:
- check_all: wait for every frame (exact counts, e.g. "exactly one occurrence")
- race_first: return on the first positive frame (e.g. "text appears anywhere")
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from stable_locator.engine.frame_catalog import FrameCatalog
from stable_locator.engine.models import FrameHandle, VisibilityResult
from stable_locator.exceptions import FrameTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

FramePredicate = Callable[[FrameHandle], Awaitable[bool]]
FrameCounter = Callable[[FrameHandle], Awaitable[int]]

PER_FRAME_TIMEOUT_MS = 2000


async def bounded(
    frame: FrameHandle,
    check: Callable[[FrameHandle], Awaitable[T]],
    timeout_ms: int,
    default: T,
) -> T:
    """
    Run a per-frame coroutine with a timeout, returning ``default`` on failure.

    Args:
        frame: Frame to check
        check: Coroutine factory taking the frame
        timeout_ms: Bound for this frame
        default: Value used on timeout or error
    """
    try:
        return await asyncio.wait_for(check(frame), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        error = FrameTimeoutError("Per-frame check timed out", timeout_ms=timeout_ms, frame_path=frame.path)
        logger.debug(str(error))
    except Exception as e:
        logger.debug(f"Check in {frame.path} failed: {e}")
    return default


class ParallelVisibilityChecker:
    """
    Fan a visibility predicate out over every frame.

    Usage:
        checker = ParallelVisibilityChecker(catalog)
        results = await checker.check_all(
            lambda frame: capability.wait_visible(frame.context, query, 2000)
        )
    """

    def __init__(self, catalog: FrameCatalog, per_frame_timeout_ms: int = PER_FRAME_TIMEOUT_MS):
        self._catalog = catalog
        self.per_frame_timeout_ms = per_frame_timeout_ms

    async def check_all(
        self,
        predicate: FramePredicate,
        counter: Optional[FrameCounter] = None,
        frames: Optional[List[FrameHandle]] = None,
    ) -> List[VisibilityResult]:
        """
        Check every frame and wait for all of them to settle.

        Args:
            predicate: Async per-frame check
            counter: Optional async per-frame match count, run after the predicate
            frames: Catalog snapshot to reuse (a fresh one is taken otherwise)

        Returns:
            One result per frame, in catalog order
        """
        if frames is None:
            frames = await self._catalog.snapshot()

        results = await asyncio.gather(
            *(self._check(frame, predicate, counter) for frame in frames)
        )
        found = [r.frame for r in results if r.found]
        logger.debug(f"Checked {len(frames)} frame(s), found in: {found}")
        return list(results)

    async def race_first(
        self,
        predicate: FramePredicate,
        counter: Optional[FrameCounter] = None,
        frames: Optional[List[FrameHandle]] = None,
    ) -> List[VisibilityResult]:
        """
        Check every frame and return as soon as one reports a match.

        Returns:
            ``[first_positive]`` if any frame matched, else every result
            in catalog order
        """
        if frames is None:
            frames = await self._catalog.snapshot()
        if not frames:
            return []

        tasks = [
            asyncio.create_task(self._check(frame, predicate, counter), name=frame.path)
            for frame in frames
        ]

        pending = set(tasks)
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                # Several tasks can finish together; keep catalog order among them
                for task in sorted(done, key=tasks.index):
                    result = task.result()
                    if result.found:
                        logger.debug(f"First match in {result.frame}")
                        return [result]
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return [task.result() for task in tasks]

    async def _check(
        self,
        frame: FrameHandle,
        predicate: FramePredicate,
        counter: Optional[FrameCounter],
    ) -> VisibilityResult:
        found = await bounded(frame, predicate, self.per_frame_timeout_ms, False)
        count = None
        if counter is not None:
            count = await bounded(frame, counter, self.per_frame_timeout_ms, None)
        return VisibilityResult(found=bool(found), frame=frame.path, depth=frame.depth, count=count)
