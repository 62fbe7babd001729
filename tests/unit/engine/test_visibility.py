"""
Tests for ParallelVisibilityChecker - bounded per-frame checks.
"""

import asyncio

import pytest

from stable_locator.engine.frame_catalog import FrameCatalog
from stable_locator.engine.models import VisibilityResult
from stable_locator.engine.visibility import ParallelVisibilityChecker, bounded


def checker_for(capability, timeout_ms: int = 200) -> ParallelVisibilityChecker:
    return ParallelVisibilityChecker(FrameCatalog(capability), per_frame_timeout_ms=timeout_ms)


def found_in(*labels):
    async def predicate(frame):
        return frame.context.label in labels
    return predicate


class TestBounded:
    """Test the per-frame bound."""

    @pytest.mark.asyncio
    async def test_timeout_returns_default(self, nested_page):
        frames = await FrameCatalog(nested_page).snapshot()

        async def slow(frame):
            await asyncio.sleep(5)
            return True

        assert await bounded(frames[0], slow, 50, False) is False

    @pytest.mark.asyncio
    async def test_error_returns_default(self, nested_page):
        frames = await FrameCatalog(nested_page).snapshot()

        async def broken(frame):
            raise RuntimeError("frame detached")

        assert await bounded(frames[0], broken, 50, "default") == "default"


class TestCheckAll:
    """Test all-settle aggregation."""

    @pytest.mark.asyncio
    async def test_one_result_per_frame_in_order(self, nested_page):
        results = await checker_for(nested_page).check_all(found_in("deep"))

        assert results == [
            VisibilityResult(found=False, frame="main", depth=0),
            VisibilityResult(found=False, frame="main > iframe-0-0", depth=1),
            VisibilityResult(found=True, frame="main > iframe-0-0 > iframe-1-0", depth=2),
            VisibilityResult(found=False, frame="main > iframe-0-1", depth=1),
        ]

    @pytest.mark.asyncio
    async def test_timeout_and_errors_fold_to_not_found(self, nested_page):
        """Test a stuck frame and a failing frame do not affect the others."""
        async def predicate(frame):
            label = frame.context.label
            if label == "first":
                await asyncio.sleep(5)
            if label == "second":
                raise RuntimeError("detached")
            return True

        results = await checker_for(nested_page, timeout_ms=50).check_all(predicate)

        assert [r.found for r in results] == [True, False, True, False]

    @pytest.mark.asyncio
    async def test_counter(self, nested_page):
        async def counter(frame):
            return 2 if frame.context.label == "main" else 0

        results = await checker_for(nested_page).check_all(found_in("main"), counter=counter)

        assert [r.count for r in results] == [2, 0, 0, 0]

    @pytest.mark.asyncio
    async def test_reuses_snapshot(self, nested_page):
        frames = (await FrameCatalog(nested_page).snapshot())[:1]

        results = await checker_for(nested_page).check_all(found_in("main"), frames=frames)

        assert len(results) == 1


class TestRaceFirst:
    """Test race-to-first aggregation."""

    @pytest.mark.asyncio
    async def test_returns_first_positive_only(self, nested_page):
        results = await checker_for(nested_page).race_first(found_in("first"))

        assert results == [VisibilityResult(found=True, frame="main > iframe-0-0", depth=1)]

    @pytest.mark.asyncio
    async def test_does_not_wait_for_slow_frames(self, nested_page):
        """Test a positive frame wins without waiting out the others."""
        async def predicate(frame):
            if frame.context.label == "second":
                return True
            await asyncio.sleep(5)
            return False

        results = await asyncio.wait_for(
            checker_for(nested_page, timeout_ms=10000).race_first(predicate),
            timeout=2,
        )

        assert [r.frame for r in results] == ["main > iframe-0-1"]

    @pytest.mark.asyncio
    async def test_no_match_returns_every_frame(self, nested_page):
        results = await checker_for(nested_page).race_first(found_in())

        assert [r.frame for r in results] == [
            "main",
            "main > iframe-0-0",
            "main > iframe-0-0 > iframe-1-0",
            "main > iframe-0-1",
        ]
        assert not any(r.found for r in results)

    @pytest.mark.asyncio
    async def test_empty_snapshot(self, nested_page):
        assert await checker_for(nested_page).race_first(found_in("main"), frames=[]) == []

    @pytest.mark.asyncio
    async def test_losing_frames_cancelled_before_return(self, nested_page):
        """Test the other frame checks have finished cancelling when race_first returns."""
        cancelled = []

        async def predicate(frame):
            if frame.context.label == "main":
                return True
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.append(frame.context.label)
                raise
            return False

        results = await checker_for(nested_page, timeout_ms=10000).race_first(predicate)

        assert [r.frame for r in results] == ["main"]
        assert sorted(cancelled) == ["deep", "first", "second"]
