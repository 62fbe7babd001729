"""
Locator Engine - Entry point used by validation tools.

Wires the frame catalog, resolver, synthesizer and visibility checker to one
page capability and exposes the four operations tools rely on:

- resolve(reference)
- synthesize_selectors(resolved)
- find_across_frames(role, accessible_name)
- search_text_across_frames(text, match_type)

Example:
    >>> engine = LocatorEngine(PlaywrightPageCapability(page))
    >>> resolved = await engine.resolve(ElementReference(role="button", accessible_name="Submit"))
    >>> selectors = await engine.synthesize_selectors(resolved)
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple, Union

from stable_locator.config.settings import LocatorSettings
from stable_locator.engine.candidates import CandidateGenerator
from stable_locator.engine.frame_catalog import FrameCatalog
from stable_locator.engine.models import (
    CandidateSelector,
    ElementReference,
    FrameHandle,
    FrameSearchReport,
    ResolvedElement,
)
from stable_locator.engine.resolver import ElementResolver
from stable_locator.engine.signals import SignalCollector
from stable_locator.engine.synthesizer import SelectorSynthesizer
from stable_locator.engine.uniqueness import UniquenessOracle
from stable_locator.engine.visibility import ParallelVisibilityChecker
from stable_locator.interfaces.page import ElementQuery, IPageCapability

logger = logging.getLogger(__name__)


class TextMatchType(Enum):
    """How text is matched in a whole-page text search."""
    EXACT = "exact"
    CONTAINS = "contains"
    NOT_CONTAINS = "not-contains"


class LocatorEngine:
    """
    Element resolution and stable selector synthesis over one page.

    Every operation takes a fresh frame catalog snapshot, so no state carries
    over between calls.
    """

    def __init__(self, capability: IPageCapability, settings: Optional[LocatorSettings] = None):
        self.settings = settings or LocatorSettings()
        self._capability = capability

        self.catalog = FrameCatalog(capability)
        self.oracle = UniquenessOracle(capability)
        self.collector = SignalCollector(
            capability,
            test_id_attributes=self.settings.test_id_attributes,
            max_classes=self.settings.max_stable_classes,
            max_text_length=self.settings.max_text_length,
        )
        self.generator = CandidateGenerator(
            max_text_length=self.settings.max_text_selector_length,
            shadow_combinator=self.settings.shadow_combinator,
        )
        self.synthesizer = SelectorSynthesizer(
            self.collector,
            self.generator,
            self.oracle,
            max_selectors=self.settings.max_selectors,
        )
        self.resolver = ElementResolver(
            capability,
            self.catalog,
            per_frame_timeout_ms=self.settings.per_frame_timeout_ms,
        )
        self.checker = ParallelVisibilityChecker(
            self.catalog,
            per_frame_timeout_ms=self.settings.per_frame_timeout_ms,
        )

    async def resolve(self, reference: ElementReference) -> ResolvedElement:
        """
        Resolve a stored reference or role + accessible name to a live element.

        Raises:
            ElementNotFoundError: Nothing matched
            MultipleMatchError: More than one element matched
        """
        return await self.resolver.resolve(reference)

    async def synthesize_selectors(self, resolved: ResolvedElement) -> List[CandidateSelector]:
        """
        Ranked selectors, each matching exactly one element right now.

        Raises:
            ElementNotFoundError: If the element has been detached
        """
        return await self.synthesizer.synthesize(resolved)

    async def locate_and_synthesize(
        self,
        reference: ElementReference,
    ) -> Tuple[ResolvedElement, List[CandidateSelector]]:
        """Resolve a reference and synthesize selectors for it in one go."""
        resolved = await self.resolve(reference)
        selectors = await self.synthesize_selectors(resolved)
        logger.info(
            f"{reference.describe()} in {resolved.frame.path}: "
            f"{[s.selector for s in selectors]}"
        )
        return resolved, selectors

    async def find_across_frames(
        self,
        role: str,
        accessible_name: str,
        frames: Optional[List[FrameHandle]] = None,
    ) -> FrameSearchReport:
        """
        Look for a visible role + name match in every frame.

        Waits for every frame and counts the matches in each, so the report
        can tell "exactly one on the page" from "several", including several
        in the same frame.
        """
        query = ElementQuery.role(role, name=accessible_name)
        timeout_ms = self.settings.per_frame_timeout_ms
        capability = self._capability

        async def predicate(frame: FrameHandle) -> bool:
            return await capability.wait_visible(frame.context, query, timeout_ms)

        async def counter(frame: FrameHandle) -> int:
            return await capability.count_query(frame.context, query)

        results = await self.checker.check_all(predicate, counter=counter, frames=frames)
        report = FrameSearchReport(description=f'{role} "{accessible_name}"', results=results)
        logger.info(f"{report.description}: {report.outcome.value} {report.frame_paths}")
        return report

    async def search_text_across_frames(
        self,
        text: str,
        match_type: Union[TextMatchType, str] = TextMatchType.CONTAINS,
        frames: Optional[List[FrameHandle]] = None,
    ) -> FrameSearchReport:
        """
        Look for text in every frame, returning on the first frame that has it.

        For ``not-contains`` a result with ``found=True`` means the text is
        present where it should not be.

        Returns:
            The first positive frame only, or every frame when none matched
        """
        match_type = TextMatchType(match_type)
        query = ElementQuery.text(text, exact=match_type == TextMatchType.EXACT)
        timeout_ms = self.settings.per_frame_timeout_ms
        capability = self._capability

        if match_type == TextMatchType.NOT_CONTAINS:
            async def predicate(frame: FrameHandle) -> bool:
                return not await capability.wait_absent(frame.context, query, timeout_ms)
        else:
            async def predicate(frame: FrameHandle) -> bool:
                return await capability.wait_visible(frame.context, query, timeout_ms)

        async def counter(frame: FrameHandle) -> int:
            return await capability.count_query(frame.context, query)

        results = await self.checker.race_first(predicate, counter=counter, frames=frames)
        report = FrameSearchReport(description=f'text "{text}" ({match_type.value})', results=results)
        logger.info(f"{report.description}: {report.outcome.value} {report.frame_paths}")
        return report
