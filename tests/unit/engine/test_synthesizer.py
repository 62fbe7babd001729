"""
Tests for SelectorSynthesizer - verified-unique selectors with a path fallback.
"""

import pytest

from stable_locator.engine.candidates import CandidateGenerator
from stable_locator.engine.models import FrameHandle, ResolvedElement, SelectorKind
from stable_locator.engine.signals import SignalCollector
from stable_locator.engine.synthesizer import SelectorSynthesizer
from stable_locator.engine.uniqueness import UniquenessOracle
from stable_locator.exceptions import ElementNotFoundError
from tests.fakes import FakeElement, FakeFrame, FakePageCapability, element_facts, path_node


def build(frame: FakeFrame, max_selectors: int = 5):
    capability = FakePageCapability(frame)
    synthesizer = SelectorSynthesizer(
        SignalCollector(capability),
        CandidateGenerator(),
        UniquenessOracle(capability),
        max_selectors=max_selectors,
    )
    return capability, synthesizer


def resolved(frame: FakeFrame, **facts) -> ResolvedElement:
    return ResolvedElement(element=FakeElement(facts=element_facts(**facts)), frame=FrameHandle.main(frame))


class TestSelectorSynthesizer:
    """Test selector synthesis."""

    @pytest.mark.asyncio
    async def test_test_id_before_class(self):
        """Test a unique test id outranks a class and non-unique candidates are rejected."""
        frame = FakeFrame("main", selectors={
            '[data-testid="save"]': 1,
            'button[data-testid="save"]': 1,
            "button.btn": 3,
            'button:text-is("Save")': 1,
        })
        _, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(
            resolved(frame, tag="button", test_ids={"data-testid": "save"}, class_name="btn", text="Save")
        )

        assert [s.selector for s in selectors] == [
            '[data-testid="save"]',
            'button[data-testid="save"]',
            'button:text-is("Save")',
        ]
        assert [s.priority for s in selectors] == [1, 2, 9]

    @pytest.mark.asyncio
    async def test_every_result_is_unique(self):
        frame = FakeFrame("main", selectors={"#go": 1, 'role=button[name="Go"]': 2})
        capability, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(
            resolved(frame, id="go", role="button", accessible_name="Go")
        )

        for selector in selectors:
            assert frame.selectors[selector.selector] == 1

    @pytest.mark.asyncio
    async def test_max_selectors(self):
        frame = FakeFrame("main", selectors={
            '[data-testid="save"]': 1,
            'button[data-testid="save"]': 1,
            "#save": 1,
        })
        _, synthesizer = build(frame, max_selectors=2)

        selectors = await synthesizer.synthesize(
            resolved(frame, tag="button", id="save", test_ids={"data-testid": "save"})
        )

        assert len(selectors) == 2

    @pytest.mark.asyncio
    async def test_invalid_candidate_skipped(self):
        """Test a candidate the page rejects is skipped, not fatal."""
        frame = FakeFrame(
            "main",
            selectors={'role=button[name="Go"]': 1},
            invalid=["#go"],
        )
        _, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(
            resolved(frame, id="go", role="button", accessible_name="Go")
        )

        assert [s.selector for s in selectors] == ['role=button[name="Go"]']

    @pytest.mark.asyncio
    async def test_duplicates_checked_once(self):
        """Test identical selectors from different strategies appear once."""
        frame = FakeFrame("main", selectors={'input[name="q"]': 1})
        capability, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(resolved(frame, tag="input", name="q"))

        assert [(s.selector, s.priority) for s in selectors] == [('input[name="q"]', 5)]
        assert capability.counted.count('input[name="q"]') == 1

    @pytest.mark.asyncio
    async def test_minimal_unique_path_fallback(self):
        """Test the shortest unique ancestor path is used when no candidate survives."""
        frame = FakeFrame("main", selectors={
            "section > div:nth-of-type(2)": 2,
            "#content > section > div:nth-of-type(2)": 1,
        })
        _, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(resolved(frame, tag="div", path=[
            path_node("div", nth_of_type=2, same_tag_siblings=3),
            path_node("section", id="a1b2c3d4e5"),
            path_node("main", id="content"),
            path_node("body"),
            path_node("html"),
        ]))

        assert len(selectors) == 1
        assert selectors[0].selector == "#content > section > div:nth-of-type(2)"
        assert selectors[0].priority == 99
        assert selectors[0].kind == SelectorKind.MINIMAL_UNIQUE_PATH

    @pytest.mark.asyncio
    async def test_no_path_selects_element(self):
        """Test an unverified full path is never returned."""
        frame = FakeFrame("main")
        _, synthesizer = build(frame)

        with pytest.raises(ElementNotFoundError) as exc_info:
            await synthesizer.synthesize(resolved(frame, tag="span", id="price"))
        assert exc_info.value.selector == "html > body > #price"

    @pytest.mark.asyncio
    async def test_unique_selector_on_another_element_rejected(self):
        """Test a selector matching one element is dropped when that element is not the target."""
        frame = FakeFrame(
            "main",
            selectors={'div:text-is("Total")': 1, "#summary > div": 1},
            targets={'div:text-is("Total")': FakeElement()},
        )
        _, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(resolved(frame, tag="div", text="Total", path=[
            path_node("div"),
            path_node("section", id="summary"),
        ]))

        assert [s.selector for s in selectors] == ["#summary > div"]
        assert selectors[0].kind == SelectorKind.MINIMAL_UNIQUE_PATH

    @pytest.mark.asyncio
    async def test_path_uses_form_names_and_test_ids(self):
        frame = FakeFrame("main", selectors={'form[data-test="signup"] > input[name="age"]': 1})
        _, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(resolved(frame, tag="input", name="age", path=[
            path_node("input", name="age"),
            path_node("form", test_ids={"data-test": "signup"}),
        ]))

        assert [s.selector for s in selectors] == ['form[data-test="signup"] > input[name="age"]']

    @pytest.mark.asyncio
    async def test_path_inside_shadow_root(self):
        frame = FakeFrame("main", selectors={"my-widget >> span": 1})
        _, synthesizer = build(frame)

        selectors = await synthesizer.synthesize(resolved(
            frame,
            tag="span",
            shadow_hosts=[{"tag": "my-widget", "id": None}],
            path=[path_node("span"), path_node("div")],
        ))

        assert [s.selector for s in selectors] == ["my-widget >> span"]

    @pytest.mark.asyncio
    async def test_detached_element(self):
        frame = FakeFrame("main")
        _, synthesizer = build(frame)
        element = ResolvedElement(element=FakeElement(connected=False), frame=FrameHandle.main(frame))

        with pytest.raises(ElementNotFoundError):
            await synthesizer.synthesize(element)
