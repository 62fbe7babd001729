"""
Candidate Generator - Turn element signals into ranked selector candidates.

Priority order (lower is preferred), mirroring expected long-term stability:

     1-2  test-id attributes
       3  stable id
       4  ARIA role + accessible name
     5-7  form control name / placeholder / type
       8  stable class combination
       9  short visible text
   10-12  anchor + name / class / text
      13  combined attributes on the tag
      99  minimal unique path (built by the synthesizer)

Nothing here checks uniqueness; that is the synthesizer's job.
"""

from typing import List, Optional

from stable_locator.engine import selector_syntax as syntax
from stable_locator.engine.models import CandidateSelector, ElementSignals, SelectorKind

MAX_TEXT_SELECTOR_LENGTH = 50
MINIMAL_PATH_PRIORITY = 99


class CandidateGenerator:
    """
    Deterministic candidate generation.

    Example:
        >>> generator = CandidateGenerator()
        >>> candidates = generator.generate(signals)
        >>> candidates[0].selector
        '[data-testid="login"]'
    """

    def __init__(
        self,
        max_text_length: int = MAX_TEXT_SELECTOR_LENGTH,
        shadow_combinator: str = syntax.CHAIN_COMBINATOR,
    ):
        self.max_text_length = max_text_length
        self.shadow_combinator = shadow_combinator

    def generate(self, signals: ElementSignals) -> List[CandidateSelector]:
        """
        Generate candidates for an element, in generation order.

        Args:
            signals: Signals collected from the element

        Returns:
            Candidates, not yet checked for uniqueness
        """
        tag = signals.tag
        candidates: List[CandidateSelector] = []

        def add(selector: str, priority: int, kind: SelectorKind) -> None:
            selector = syntax.pierce(signals.shadow_chain, selector, self.shadow_combinator)
            candidates.append(CandidateSelector(selector=selector, priority=priority, kind=kind))

        # 1. Test ids
        if signals.test_ids:
            attrs = list(signals.test_ids.items())
            attr, value = attrs[0]
            add(syntax.attribute(attr, value), 1, SelectorKind.TEST_ID)
            if len(attrs) > 1:
                second_attr, second_value = attrs[1]
                add(syntax.attribute(second_attr, second_value), 2, SelectorKind.TEST_ID)
            else:
                add(syntax.attribute(attr, value, tag), 2, SelectorKind.TEST_ID)

        # 2. Stable id
        if signals.element_id and signals.id_is_stable:
            add(syntax.id_selector(signals.element_id), 3, SelectorKind.ID)

        # 3. Role + accessible name
        if signals.role and signals.accessible_name:
            add(syntax.role_selector(signals.role, signals.accessible_name), 4, SelectorKind.ROLE_NAME)

        # 4. Form control attributes
        if signals.is_form_control:
            if signals.name:
                add(syntax.attribute("name", signals.name, tag), 5, SelectorKind.ATTRIBUTE)
            if signals.placeholder:
                add(syntax.attribute("placeholder", signals.placeholder, tag), 6, SelectorKind.ATTRIBUTE)
            if signals.input_type:
                add(syntax.attribute("type", signals.input_type, tag), 7, SelectorKind.ATTRIBUTE)

        # 5. Stable classes
        if signals.stable_classes:
            add(syntax.class_selector(tag, signals.stable_classes), 8, SelectorKind.CLASS)

        # 6. Short visible text
        text = self._short_text(signals)
        if text:
            add(syntax.text_selector(tag, text), 9, SelectorKind.TEXT)

        # 7. Anchor combinations
        if signals.anchor:
            anchor = signals.anchor
            if signals.name:
                add(syntax.scoped(anchor, syntax.attribute("name", signals.name, tag)), 10, SelectorKind.ANCHOR_COMBO)
            if signals.stable_classes:
                add(syntax.scoped(anchor, syntax.class_selector(tag, signals.stable_classes)), 11, SelectorKind.ANCHOR_COMBO)
            if text:
                add(syntax.scoped(anchor, syntax.text_selector(tag, text)), 12, SelectorKind.ANCHOR_COMBO)

        # 8. Combined attributes
        combined = self._combined_attributes(signals)
        if combined:
            add(combined, 13, SelectorKind.ATTRIBUTE_COMBO)

        return candidates

    def _short_text(self, signals: ElementSignals) -> Optional[str]:
        text = signals.text.strip()
        if text and len(text) <= self.max_text_length:
            return text
        return None

    def _combined_attributes(self, signals: ElementSignals) -> Optional[str]:
        parts = [
            ("type", signals.input_type),
            ("name", signals.name),
            ("placeholder", signals.placeholder),
        ]
        present = [(name, value) for name, value in parts if value]
        if not present:
            return None
        return signals.tag + "".join(syntax.attribute(name, value) for name, value in present)


def sort_by_priority(candidates: List[CandidateSelector]) -> List[CandidateSelector]:
    """Ascending priority; ties keep generation order (sorted() is stable)."""
    return sorted(candidates, key=lambda c: c.priority)
