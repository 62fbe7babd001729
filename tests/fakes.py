"""
In-memory page capability used by the unit tests.

A page is a tree of FakeFrames. Each frame holds a table of selector match
counts and a list of FakeElements that role and text queries match against.
Role queries skip hidden elements unless the query includes them, like
Playwright's getByRole.
"""

import asyncio
from typing import Any, Dict, List, Optional

from stable_locator.exceptions import FrameAccessError, SelectorInvalidError
from stable_locator.interfaces.page import ElementQuery, IPageCapability, QueryKind


class FakeElement:
    """Element with canned signal facts."""

    def __init__(
        self,
        role: Optional[str] = None,
        name: str = "",
        text: str = "",
        visible: bool = True,
        facts: Optional[Dict[str, Any]] = None,
        connected: bool = True,
    ):
        self.role = role
        self.name = name
        self.text = text
        self.visible = visible
        self.facts = facts or element_facts()
        self.connected = connected

    def __repr__(self) -> str:
        return f"FakeElement(role={self.role!r}, name={self.name!r})"


class FakeFrame:
    """One document: selector counts, elements and child frames."""

    def __init__(
        self,
        label: str = "frame",
        selectors: Optional[Dict[str, int]] = None,
        elements: Optional[List[FakeElement]] = None,
        children: Optional[List["FakeFrame"]] = None,
        invalid: Optional[List[str]] = None,
        unreachable: bool = False,
        delay: float = 0.0,
        targets: Optional[Dict[str, FakeElement]] = None,
    ):
        self.label = label
        self.selectors = selectors or {}
        self.elements = elements or []
        self.children = children or []
        self.invalid = set(invalid or [])
        self.unreachable = unreachable
        self.delay = delay
        self.targets = targets or {}

    def __repr__(self) -> str:
        return f"FakeFrame({self.label!r})"


class FakePageCapability(IPageCapability):
    """IPageCapability over a FakeFrame tree."""

    def __init__(self, main: FakeFrame, refs: Optional[Dict[str, FakeElement]] = None):
        self.main = main
        self.refs = refs or {}
        self.counted: List[str] = []

    def main_frame(self) -> Any:
        return self.main

    async def count_matches(self, frame: FakeFrame, selector: str) -> int:
        self.counted.append(selector)
        if selector in frame.invalid:
            raise SelectorInvalidError("Unexpected token", selector=selector)
        return frame.selectors.get(selector, 0)

    async def count_query(self, frame: FakeFrame, query: ElementQuery) -> int:
        return len(self._matching(frame, query))

    async def locate(self, frame: FakeFrame, query: ElementQuery) -> List[Any]:
        if frame.delay:
            await asyncio.sleep(frame.delay)
        return self._matching(frame, query)

    async def evaluate(self, target: FakeElement, script: str, arg: Any = None) -> Any:
        return dict(target.facts, connected=target.connected)

    async def iframe_count(self, frame: FakeFrame) -> int:
        if frame.unreachable:
            raise FrameAccessError(f"{frame.label} is detached")
        return len(frame.children)

    async def iframe_at(self, frame: FakeFrame, index: int) -> Any:
        return frame.children[index]

    async def wait_visible(self, frame: FakeFrame, query: ElementQuery, timeout_ms: int) -> bool:
        if frame.delay:
            await asyncio.sleep(frame.delay)
        return any(e.visible for e in self._matching(frame, query))

    async def wait_absent(self, frame: FakeFrame, query: ElementQuery, timeout_ms: int) -> bool:
        if frame.delay:
            await asyncio.sleep(frame.delay)
        return not self._matching(frame, query)

    async def is_visible(self, element: FakeElement) -> bool:
        return element.visible

    async def lookup_ref(self, ref: str) -> Optional[Any]:
        return self.refs.get(ref)

    async def contains_element(self, frame: FakeFrame, element: FakeElement) -> bool:
        if frame.unreachable:
            raise FrameAccessError(f"{frame.label} is detached")
        return any(e is element for e in frame.elements)

    async def is_same_element(self, frame: FakeFrame, selector: str, element: FakeElement) -> bool:
        # Selectors without a recorded target are taken to point at the element
        target = frame.targets.get(selector)
        return target is None or target is element

    def _matching(self, frame: FakeFrame, query: ElementQuery) -> List[FakeElement]:
        if query.kind == QueryKind.ROLE:
            return [
                e for e in frame.elements
                if e.role == query.value
                and (e.visible or query.include_hidden)
                and _name_matches(e.name, query.name, query.exact)
            ]
        if query.kind == QueryKind.TEXT:
            return [e for e in frame.elements if e.text and _name_matches(e.text, query.value, query.exact)]
        return []


def _name_matches(actual: str, wanted: Optional[str], exact: bool) -> bool:
    if wanted is None:
        return True
    if exact:
        return actual == wanted
    return wanted.lower() in actual.lower()


def element_facts(
    tag: str = "button",
    id: Optional[str] = None,
    test_ids: Optional[Dict[str, str]] = None,
    name: Optional[str] = None,
    placeholder: Optional[str] = None,
    type: Optional[str] = None,
    class_name: str = "",
    role: Optional[str] = None,
    accessible_name: Optional[str] = None,
    text: str = "",
    ancestors: Optional[List[Dict[str, Any]]] = None,
    shadow_hosts: Optional[List[Dict[str, Any]]] = None,
    path: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Raw facts in the shape the signal collection script returns."""
    if path is None:
        path = [
            path_node(tag, id=id, test_ids=test_ids, name=name),
            path_node("body"),
            path_node("html"),
        ]
    return {
        "connected": True,
        "tag": tag,
        "id": id,
        "test_ids": test_ids or {},
        "name": name,
        "placeholder": placeholder,
        "type": type,
        "class_name": class_name,
        "role": role,
        "accessible_name": accessible_name,
        "text": text,
        "ancestors": ancestors or [],
        "shadow_hosts": shadow_hosts or [],
        "path": path,
    }


def path_node(
    tag: str,
    id: Optional[str] = None,
    test_ids: Optional[Dict[str, str]] = None,
    name: Optional[str] = None,
    nth_of_type: int = 1,
    same_tag_siblings: int = 1,
) -> Dict[str, Any]:
    return {
        "tag": tag,
        "id": id,
        "test_ids": test_ids or {},
        "name": name,
        "nth_of_type": nth_of_type,
        "same_tag_siblings": same_tag_siblings,
    }


def ancestor(
    tag: str = "div",
    id: Optional[str] = None,
    test_ids: Optional[Dict[str, str]] = None,
    role: Optional[str] = None,
    label: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "tag": tag,
        "id": id,
        "test_ids": test_ids or {},
        "role": role,
        "role_attribute": False,
        "label": label,
    }
