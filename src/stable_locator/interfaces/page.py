"""
Page Capability Interface - Abstract contract between the engine and a browser.

The resolution engine never talks to a DOM implementation directly. Everything it
needs from the live document goes through an IPageCapability, which keeps the
engine testable against an in-memory fake and lets browser adapters (Playwright
today) plug in behind it.

Frame contexts and element handles are opaque to the engine: it only hands them
back to the capability that produced them.

Example:
    >>> from stable_locator.browsers import PlaywrightPageCapability
    >>> capability = PlaywrightPageCapability(page)
    >>> frame = capability.main_frame()
    >>> await capability.count_matches(frame, "#login")
    1
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


class QueryKind(Enum):
    """What an ElementQuery matches on."""
    SELECTOR = "selector"
    ROLE = "role"
    TEXT = "text"


@dataclass(frozen=True)
class ElementQuery:
    """
    A description of elements to look for inside one frame.

    Attributes:
        kind: Selector, ARIA role or visible text
        value: The selector, role name or text
        name: Accessible name (role queries only)
        exact: Require an exact (rather than substring) text/name match
        include_hidden: Also match elements hidden from assistive technology
            (role queries only)
    """
    kind: QueryKind
    value: str
    name: Optional[str] = None
    exact: bool = False
    include_hidden: bool = False

    @classmethod
    def selector(cls, selector: str) -> "ElementQuery":
        return cls(QueryKind.SELECTOR, selector)

    @classmethod
    def role(
        cls,
        role: str,
        name: Optional[str] = None,
        exact: bool = False,
        include_hidden: bool = False,
    ) -> "ElementQuery":
        return cls(QueryKind.ROLE, role, name=name, exact=exact, include_hidden=include_hidden)

    @classmethod
    def text(cls, text: str, exact: bool = False) -> "ElementQuery":
        return cls(QueryKind.TEXT, text, exact=exact)

    def describe(self) -> str:
        """Short human-readable form used in logs and error messages."""
        if self.kind == QueryKind.ROLE:
            if self.name is not None:
                return f'role={self.value} name="{self.name}"'
            return f"role={self.value}"
        if self.kind == QueryKind.TEXT:
            return f'text{"=" if self.exact else "~"}"{self.value}"'
        return self.value


class IPageCapability(ABC):
    """
    Abstract interface to the live page.

    Suspension points of the engine are exactly the awaits on this interface.
    Implementations may raise on malformed selectors or unreachable frames;
    the engine absorbs those failures where the contract says so.
    """

    @abstractmethod
    def main_frame(self) -> Any:
        """
        Get the context of the top-level document.

        Returns:
            Opaque frame context
        """
        ...

    @abstractmethod
    async def count_matches(self, frame: Any, selector: str) -> int:
        """
        Count elements matching a selector expression in one frame.

        Args:
            frame: Frame context
            selector: Selector expression

        Returns:
            Number of matching elements

        Raises:
            SelectorInvalidError: If the expression cannot be parsed
        """
        ...

    @abstractmethod
    async def count_query(self, frame: Any, query: ElementQuery) -> int:
        """
        Count elements matching a query in one frame.

        Args:
            frame: Frame context
            query: Role, text or selector query

        Returns:
            Number of matching elements
        """
        ...

    @abstractmethod
    async def locate(self, frame: Any, query: ElementQuery) -> List[Any]:
        """
        Get handles for every element matching a query in one frame.

        Args:
            frame: Frame context
            query: Role, text or selector query

        Returns:
            Element handles in document order
        """
        ...

    @abstractmethod
    async def evaluate(self, target: Any, script: str, arg: Any = None) -> Any:
        """
        Run a read-only script against an element.

        Args:
            target: Element handle
            script: Function source taking (element, arg)
            arg: JSON-serializable argument

        Returns:
            The script's JSON-serializable result
        """
        ...

    @abstractmethod
    async def iframe_count(self, frame: Any) -> int:
        """
        Count iframe elements directly inside a frame's document.

        Raises:
            FrameAccessError: If the frame is no longer reachable
        """
        ...

    @abstractmethod
    async def iframe_at(self, frame: Any, index: int) -> Any:
        """
        Get the context of the index-th iframe inside a frame.

        Raises:
            FrameAccessError: If the frame is no longer reachable
        """
        ...

    @abstractmethod
    async def wait_visible(self, frame: Any, query: ElementQuery, timeout_ms: int) -> bool:
        """
        Wait until the first element matching a query is visible.

        Returns:
            True if it became visible in time, False on timeout or error.
            Never raises.
        """
        ...

    @abstractmethod
    async def wait_absent(self, frame: Any, query: ElementQuery, timeout_ms: int) -> bool:
        """
        Wait until no element matches a query.

        Returns:
            True if the match count reached zero in time, False otherwise.
            Never raises.
        """
        ...

    @abstractmethod
    async def is_visible(self, element: Any) -> bool:
        """Check whether an element handle is currently visible."""
        ...

    @abstractmethod
    async def lookup_ref(self, ref: str) -> Optional[Any]:
        """
        Look up an element by a snapshot reference.

        Args:
            ref: Reference captured from an earlier page snapshot

        Returns:
            Element handle if the reference still points at an attached
            element, None otherwise
        """
        ...

    @abstractmethod
    async def contains_element(self, frame: Any, element: Any) -> bool:
        """
        Check whether an element belongs to a frame's own document.

        Elements inside open shadow roots belong to the document of their
        host. Elements of nested iframes do not belong to the parent.

        Raises:
            FrameAccessError: If the frame or element is no longer reachable
        """
        ...

    @abstractmethod
    async def is_same_element(self, frame: Any, selector: str, element: Any) -> bool:
        """
        Check that a selector matching one element in a frame matches this one.

        Args:
            frame: Frame context the selector is run in
            selector: Selector already known to match exactly one element
            element: Element handle the selector should point at

        Returns:
            True if the single match is the given element. Never raises.
        """
        ...
