"""
Data model shared by the resolution engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from stable_locator.exceptions import ElementNotFoundError, MultipleMatchError


MAIN_FRAME_NAME = "main"
FRAME_PATH_SEPARATOR = " > "
FORM_CONTROL_TAGS = frozenset({"input", "textarea", "select"})


@dataclass(frozen=True)
class FrameHandle:
    """
    A document context reachable from the page.

    Attributes:
        context: Opaque frame context owned by the page capability
        name: Label of this frame ("main" or "iframe-{parent_depth}-{index}")
        path: Human-readable path from the main frame, e.g. "main > iframe-0-1"
        depth: Nesting level, 0 for the main frame
    """
    context: Any
    name: str
    path: str
    depth: int

    @classmethod
    def main(cls, context: Any) -> "FrameHandle":
        return cls(context=context, name=MAIN_FRAME_NAME, path=MAIN_FRAME_NAME, depth=0)

    def child(self, context: Any, index: int) -> "FrameHandle":
        """Handle for the index-th iframe of this frame."""
        name = f"iframe-{self.depth}-{index}"
        return FrameHandle(
            context=context,
            name=name,
            path=f"{self.path}{FRAME_PATH_SEPARATOR}{name}",
            depth=self.depth + 1,
        )


class SelectorKind(Enum):
    """Strategy that produced a candidate selector."""
    TEST_ID = "test-id"
    ID = "id"
    ROLE_NAME = "role-name"
    ATTRIBUTE = "attribute"
    CLASS = "class"
    TEXT = "text"
    ANCHOR_COMBO = "anchor-combo"
    ATTRIBUTE_COMBO = "attribute-combo"
    MINIMAL_UNIQUE_PATH = "minimal-unique-path"


@dataclass(frozen=True)
class CandidateSelector:
    """
    A selector expression proposed for an element.

    Lower priority numbers are preferred.
    """
    selector: str
    priority: int
    kind: SelectorKind

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "priority": self.priority,
            "kind": self.kind.value,
        }


@dataclass
class PathNode:
    """
    One element on the way from a target element up to its root.

    Attributes:
        tag: Lower-case tag name
        element_id: id attribute, if any
        test_ids: Test-id-like attributes present on the node
        name: name attribute, if any
        nth_of_type: 1-based position among same-tag siblings
        same_tag_siblings: Number of same-tag siblings, self included
    """
    tag: str
    element_id: Optional[str] = None
    test_ids: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None
    nth_of_type: int = 1
    same_tag_siblings: int = 1


@dataclass
class ElementSignals:
    """
    Identity signals gathered from a live element.

    Attributes:
        tag: Lower-case tag name
        element_id: Raw id attribute
        id_is_stable: Whether the id passed the dynamic-id rules
        test_ids: Test-id-like attributes in preference order
        name: name attribute
        role: Explicit or implicit ARIA role
        accessible_name: Accessible name as exposed to assistive technology
        placeholder: placeholder attribute
        input_type: type attribute
        class_name: Full class string
        stable_classes: Class tokens surviving the hashed-class rules
        text: Short visible text
        anchor: Selector of the nearest stable ancestor
        shadow_chain: Shadow host selectors, outermost first
        path: Element first, then each ancestor up to the root
    """
    tag: str
    element_id: Optional[str] = None
    id_is_stable: bool = False
    test_ids: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None
    role: Optional[str] = None
    accessible_name: Optional[str] = None
    placeholder: Optional[str] = None
    input_type: Optional[str] = None
    class_name: str = ""
    stable_classes: List[str] = field(default_factory=list)
    text: str = ""
    anchor: Optional[str] = None
    shadow_chain: List[str] = field(default_factory=list)
    path: List[PathNode] = field(default_factory=list)

    @property
    def is_form_control(self) -> bool:
        return self.tag in FORM_CONTROL_TAGS


@dataclass(frozen=True)
class ElementReference:
    """
    A logical request for an element.

    Either a stored snapshot ``ref``, a ``role`` + ``accessible_name`` pair,
    or both (the ref is tried first).
    """
    ref: Optional[str] = None
    role: Optional[str] = None
    accessible_name: Optional[str] = None
    description: str = ""

    def describe(self) -> str:
        if self.description:
            return self.description
        if self.role:
            return f'{self.role} "{self.accessible_name or ""}"'
        return f"ref={self.ref}"


class ResolutionStrategy(Enum):
    """Which step of the resolver found the element."""
    DIRECT = "direct"
    ROLE_SEARCH = "role_search"


@dataclass
class ResolvedElement:
    """
    A live element and the frame it was found in.

    Created per call and consumed right away; never persisted.
    """
    element: Any
    frame: FrameHandle
    strategy: ResolutionStrategy = ResolutionStrategy.DIRECT
    visible: bool = True


@dataclass
class VisibilityResult:
    """Outcome of one per-frame check."""
    found: bool
    frame: str
    depth: int
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"found": self.found, "frame": self.frame, "depth": self.depth}
        if self.count is not None:
            data["count"] = self.count
        return data


class SearchOutcome(Enum):
    """Classification of a cross-frame search."""
    NOT_FOUND = "not_found"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


@dataclass
class FrameSearchReport:
    """
    Aggregated results of one search across every frame.

    Attributes:
        description: What was searched for
        results: One result per frame searched
    """
    description: str
    results: List[VisibilityResult] = field(default_factory=list)

    @property
    def matches(self) -> List[VisibilityResult]:
        return [r for r in self.results if r.found]

    @property
    def frame_paths(self) -> List[str]:
        return [r.frame for r in self.matches]

    @property
    def total_count(self) -> int:
        """Matches summed across frames, at least one per matching frame."""
        return sum(max(r.count or 0, 1) for r in self.matches)

    @property
    def outcome(self) -> SearchOutcome:
        """Classification by the page-wide match count."""
        total = self.total_count
        if total == 0:
            return SearchOutcome.NOT_FOUND
        if total == 1:
            return SearchOutcome.UNIQUE
        return SearchOutcome.AMBIGUOUS

    def require_unique(self) -> VisibilityResult:
        """
        Get the single matching frame.

        Raises:
            ElementNotFoundError: If no frame matched
            MultipleMatchError: If more than one element matched, in one
                frame or across several
        """
        outcome = self.outcome
        if outcome == SearchOutcome.NOT_FOUND:
            raise ElementNotFoundError(f"{self.description} was not found in any frame")
        if outcome == SearchOutcome.AMBIGUOUS:
            raise MultipleMatchError(
                f"{self.description} matched {self.total_count} elements in {len(self.matches)} frame(s)",
                frame_paths=self.frame_paths,
            )
        return self.matches[0]
