"""
Engine Module - Element resolution and stable selector synthesis.

This is the heart of the library, handling:
- Frame enumeration across nested iframes
- Resolution of stale references by role + accessible name
- Ranked, verified-unique selector synthesis
- Bounded, concurrent per-frame visibility checks
"""

from stable_locator.engine.models import (
    FrameHandle,
    SelectorKind,
    CandidateSelector,
    PathNode,
    ElementSignals,
    ElementReference,
    ResolutionStrategy,
    ResolvedElement,
    VisibilityResult,
    SearchOutcome,
    FrameSearchReport,
)
from stable_locator.engine.frame_catalog import FrameCatalog
from stable_locator.engine.uniqueness import UniquenessOracle
from stable_locator.engine.signals import SignalCollector, is_stable_id, filter_stable_classes
from stable_locator.engine.candidates import CandidateGenerator, sort_by_priority
from stable_locator.engine.synthesizer import SelectorSynthesizer
from stable_locator.engine.visibility import ParallelVisibilityChecker
from stable_locator.engine.resolver import ElementResolver
from stable_locator.engine.locator_engine import LocatorEngine, TextMatchType

__all__ = [
    # Entry point
    "LocatorEngine",
    "TextMatchType",
    # Components
    "FrameCatalog",
    "UniquenessOracle",
    "SignalCollector",
    "CandidateGenerator",
    "SelectorSynthesizer",
    "ParallelVisibilityChecker",
    "ElementResolver",
    # Helpers
    "is_stable_id",
    "filter_stable_classes",
    "sort_by_priority",
    # Models
    "FrameHandle",
    "SelectorKind",
    "CandidateSelector",
    "PathNode",
    "ElementSignals",
    "ElementReference",
    "ResolutionStrategy",
    "ResolvedElement",
    "VisibilityResult",
    "SearchOutcome",
    "FrameSearchReport",
]
