"""
Selector Synthesizer - Ranked, verified-unique selectors for a resolved element.

Pipeline:
1. Collect signals from the live element
2. Generate candidates and sort them by priority (generation order breaks ties)
3. Keep the candidates that match exactly one element in the element's frame,
   and that element is the target, de-duplicated, up to a maximum
4. If nothing survives, fall back to the minimal unique path: climb from the
   element, adding one ancestor token at a time until the path selects it

The result is never empty; when not even the full path selects the element,
ElementNotFoundError is raised instead.
"""

import logging
from typing import Any, List

from stable_locator.engine import selector_syntax as syntax
from stable_locator.engine.candidates import (
    MINIMAL_PATH_PRIORITY,
    CandidateGenerator,
    sort_by_priority,
)
from stable_locator.engine.models import (
    FORM_CONTROL_TAGS,
    CandidateSelector,
    ElementSignals,
    FrameHandle,
    PathNode,
    ResolvedElement,
    SelectorKind,
)
from stable_locator.engine.signals import SignalCollector
from stable_locator.engine.uniqueness import UniquenessOracle
from stable_locator.exceptions import ElementNotFoundError

logger = logging.getLogger(__name__)

MAX_SELECTORS = 5
PATH_COMBINATOR = " > "


class SelectorSynthesizer:
    """
    Orchestrates SignalCollector, CandidateGenerator and UniquenessOracle.

    Usage:
        synthesizer = SelectorSynthesizer(collector, generator, oracle)
        selectors = await synthesizer.synthesize(resolved)
        best = selectors[0].selector
    """

    def __init__(
        self,
        collector: SignalCollector,
        generator: CandidateGenerator,
        oracle: UniquenessOracle,
        max_selectors: int = MAX_SELECTORS,
    ):
        self._collector = collector
        self._generator = generator
        self._oracle = oracle
        self.max_selectors = max_selectors

    async def synthesize(self, resolved: ResolvedElement) -> List[CandidateSelector]:
        """
        Build between one and ``max_selectors`` unique selectors.

        Args:
            resolved: Element and the frame it lives in

        Returns:
            Verified-unique selectors, ascending priority

        Raises:
            ElementNotFoundError: If the element is no longer attached, or no
                selector in its frame points at it
        """
        signals = await self._collector.collect(resolved.element)
        candidates = sort_by_priority(self._generator.generate(signals))

        kept: List[CandidateSelector] = []
        seen = set()
        for candidate in candidates:
            if candidate.selector in seen:
                continue
            if not await self._oracle.selects(resolved.frame, candidate.selector, resolved.element):
                logger.debug(f"Rejected {candidate.kind.value} candidate {candidate.selector!r}")
                continue
            kept.append(candidate)
            seen.add(candidate.selector)
            if len(kept) >= self.max_selectors:
                break

        if kept:
            logger.debug(f"Synthesized {len(kept)} selector(s) in {resolved.frame.path}")
            return kept

        fallback = await self.minimal_unique_path(signals, resolved.frame, resolved.element)
        logger.info(f"No stable selector survived, using minimal path {fallback.selector!r}")
        return [fallback]

    async def minimal_unique_path(
        self,
        signals: ElementSignals,
        frame: FrameHandle,
        element: Any,
    ) -> CandidateSelector:
        """
        Shortest ancestor path that matches exactly the element.

        Tokens are added bottom-up and joined top-down with the child
        combinator.

        Raises:
            ElementNotFoundError: If no prefix, the full path included,
                selects the element in ``frame``
        """
        nodes = signals.path or [PathNode(tag=signals.tag)]
        tokens: List[str] = []
        selector = signals.tag

        for node in nodes:
            tokens.append(self._path_token(node))
            selector = syntax.pierce(
                signals.shadow_chain,
                PATH_COMBINATOR.join(reversed(tokens)),
                self._generator.shadow_combinator,
            )
            if await self._oracle.selects(frame, selector, element):
                return CandidateSelector(
                    selector=selector,
                    priority=MINIMAL_PATH_PRIORITY,
                    kind=SelectorKind.MINIMAL_UNIQUE_PATH,
                )

        raise ElementNotFoundError(
            f"No path selects the element in {frame.path}",
            selector=selector,
        )

    def _path_token(self, node: PathNode) -> str:
        if node.element_id and self._collector.is_stable_id(node.element_id):
            return syntax.id_selector(node.element_id)
        if node.test_ids:
            attr, value = next(iter(node.test_ids.items()))
            return syntax.attribute(attr, value, node.tag)
        if node.tag in FORM_CONTROL_TAGS and node.name:
            return syntax.attribute("name", node.name, node.tag)
        return self._positional_token(node)

    @staticmethod
    def _positional_token(node: PathNode) -> str:
        if node.same_tag_siblings <= 1:
            return node.tag
        return f"{node.tag}:nth-of-type({node.nth_of_type})"
