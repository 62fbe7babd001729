"""
Element Resolver - Turn a possibly stale reference into a live element.

States:
    DirectLookup --found, owning frame known--> Done
    DirectLookup --absent/failed--> RoleSearch
    RoleSearch --exactly one match--> Done
    RoleSearch --zero matches--> Failed (ElementNotFoundError)
    RoleSearch --several matches--> Failed (MultipleMatchError)

A direct hit is tagged with the catalog frame whose document owns the element,
so later selector checks run where the element actually lives.

The role search scans every frame of a fresh catalog concurrently. Visible
matches win; when nothing is visible a single hidden match is still returned,
flagged ``visible=False``, so callers can tell "found, not visible" apart from
"not found".
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from stable_locator.engine.frame_catalog import FrameCatalog
from stable_locator.engine.models import (
    ElementReference,
    FrameHandle,
    ResolutionStrategy,
    ResolvedElement,
)
from stable_locator.engine.visibility import PER_FRAME_TIMEOUT_MS, bounded
from stable_locator.exceptions import ElementNotFoundError, MultipleMatchError
from stable_locator.interfaces.page import ElementQuery, IPageCapability

logger = logging.getLogger(__name__)


@dataclass
class _Match:
    element: Any
    frame: FrameHandle
    visible: bool


class ElementResolver:
    """
    Resolve ElementReferences against the live page.

    Usage:
        resolver = ElementResolver(capability, catalog)
        resolved = await resolver.resolve(ElementReference(ref="e12", role="button", accessible_name="Submit"))
        print(resolved.frame.path)
    """

    def __init__(
        self,
        capability: IPageCapability,
        catalog: FrameCatalog,
        per_frame_timeout_ms: int = PER_FRAME_TIMEOUT_MS,
    ):
        self._capability = capability
        self._catalog = catalog
        self.per_frame_timeout_ms = per_frame_timeout_ms

    async def resolve(
        self,
        reference: ElementReference,
        frames: Optional[List[FrameHandle]] = None,
    ) -> ResolvedElement:
        """
        Resolve a reference to a live element.

        Args:
            reference: Stored ref and/or role + accessible name
            frames: Catalog snapshot to reuse for the owning frame and role search

        Returns:
            The resolved element and its frame

        Raises:
            ElementNotFoundError: Nothing matched
            MultipleMatchError: The role search matched more than one element
        """
        if reference.ref:
            element = await self._direct_lookup(reference.ref)
            if element is not None:
                if frames is None:
                    frames = await self._catalog.snapshot()
                frame = await self._owning_frame(element, frames)
                if frame is not None:
                    logger.debug(f"Resolved {reference.describe()} by direct lookup in {frame.path}")
                    return ResolvedElement(element=element, frame=frame, strategy=ResolutionStrategy.DIRECT)
                logger.debug(f"Ref {reference.ref} is not inside any reachable frame")

        if not reference.role:
            raise ElementNotFoundError(
                f"Reference {reference.describe()} is stale and has no role to search for",
                selector=reference.ref,
            )

        return await self._role_search(reference, frames)

    async def _direct_lookup(self, ref: str) -> Optional[Any]:
        try:
            element = await self._capability.lookup_ref(ref)
        except Exception as e:
            logger.debug(f"Direct lookup of ref {ref} failed: {e}")
            return None
        if element is None:
            logger.debug(f"Ref {ref} is no longer on the page")
        return element

    async def _owning_frame(self, element: Any, frames: List[FrameHandle]) -> Optional[FrameHandle]:
        for frame in frames:
            try:
                if await self._capability.contains_element(frame.context, element):
                    return frame
            except Exception as e:
                logger.debug(f"Could not check {frame.path} for the element: {e}")
        return None

    async def _role_search(
        self,
        reference: ElementReference,
        frames: Optional[List[FrameHandle]],
    ) -> ResolvedElement:
        query = ElementQuery.role(reference.role, name=reference.accessible_name, include_hidden=True)
        if frames is None:
            frames = await self._catalog.snapshot()

        per_frame = await asyncio.gather(*(
            bounded(frame, lambda f: self._matches_in(f, query), self.per_frame_timeout_ms, [])
            for frame in frames
        ))
        matches = [m for frame_matches in per_frame for m in frame_matches]

        visible = [m for m in matches if m.visible]
        chosen = visible or matches

        if not chosen:
            raise ElementNotFoundError(
                f"{reference.describe()} not found in {len(frames)} frame(s)",
                selector=query.describe(),
            )

        if len(chosen) > 1:
            paths = [m.frame.path for m in chosen]
            logger.warning(f"{reference.describe()} is ambiguous: {len(chosen)} matches in {paths}")
            raise MultipleMatchError(
                f"{reference.describe()} matched {len(chosen)} elements",
                frame_paths=paths,
            )

        match = chosen[0]
        if not match.visible:
            logger.info(f"{reference.describe()} found in {match.frame.path} but not visible")
        else:
            logger.debug(f"Resolved {reference.describe()} in {match.frame.path} by role search")
        return ResolvedElement(
            element=match.element,
            frame=match.frame,
            strategy=ResolutionStrategy.ROLE_SEARCH,
            visible=match.visible,
        )

    async def _matches_in(self, frame: FrameHandle, query: ElementQuery) -> List[_Match]:
        elements = await self._capability.locate(frame.context, query)
        matches = []
        for element in elements:
            try:
                visible = await self._capability.is_visible(element)
            except Exception:
                visible = False
            matches.append(_Match(element=element, frame=frame, visible=visible))
        return matches
