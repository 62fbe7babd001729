"""
Signal Collector - Identity signals for a live element.

One read-only evaluation gathers raw facts about the element, its ancestors
and its shadow hosts. Everything that decides what is "stable" happens here in
Python, driven by pattern constants that can be replaced per collector:

- ids that look generated (numeric, hashed, framework-prefixed) are ignored
- hashed class names (CSS Modules, CSS-in-JS, framework state classes) are
  dropped and at most three classes are kept
- the nearest ancestor with a stable id, a test id or a labelled landmark
  role becomes the anchor
- shadow hosts become a chain of selectors to pierce, outermost first
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Pattern, Sequence

from stable_locator.engine import selector_syntax as syntax
from stable_locator.engine.models import ElementSignals, PathNode
from stable_locator.exceptions import ElementNotFoundError
from stable_locator.interfaces.page import IPageCapability

logger = logging.getLogger(__name__)


TEST_ID_ATTRIBUTES = ("data-testid", "data-test-id", "data-test", "data-qa", "data-cy")

# Ids matching any of these look generated and are never used on their own
DYNAMIC_ID_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"^\d+$"),                                      # Pure numeric
    re.compile(r"(?=[0-9a-f]*\d)[0-9a-f]{6,}", re.I),          # Hex-like hash run
    re.compile(r"^(?:react|ember|vue|svelte|ng-|radix-|headlessui-|mui-|:r)", re.I),
    re.compile(r":"),                                          # React useId
    re.compile(r"^(?=.*\d)(?=(?:.*[-_.]){2})\S{16,}$"),        # Long generated token
)

# Classes matching any of these are hashed or state classes
DYNAMIC_CLASS_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"^_"),                                         # CSS Modules, leading _ or __
    re.compile(r"__(?=[A-Za-z]*\d)[A-Za-z0-9]{5,}$"),          # CSS Modules hash suffix
    re.compile(r"^css-"),                                      # Emotion
    re.compile(r"^(?:sc|jsx|svelte|emotion|ng|makeStyles)-"),  # Framework utilities
    re.compile(r"(?=[0-9a-f]*\d)[0-9a-f]{6,}", re.I),
)

STRUCTURAL_ROLES = frozenset({
    "main", "navigation", "banner", "contentinfo", "form", "dialog", "region",
})

MAX_STABLE_CLASSES = 3
MAX_TEXT_LENGTH = 120


# Runs in the page: (element, {testIdAttributes, maxText}) -> raw facts
COLLECT_SIGNALS_JS = r'''
(el, arg) => {
    const testIdAttributes = arg.testIdAttributes;
    const maxText = arg.maxText;
    const LANDMARKS = {
        main: 'main', nav: 'navigation', header: 'banner', footer: 'contentinfo',
        form: 'form', dialog: 'dialog', section: 'region', aside: 'complementary'
    };
    const NAME_FROM_CONTENT = new Set([
        'button', 'link', 'heading', 'tab', 'menuitem', 'option', 'checkbox',
        'radio', 'switch', 'listitem', 'cell', 'row', 'treeitem'
    ]);

    const collapse = (s) => (s || '').replace(/\s+/g, ' ').trim();

    function testIds(node) {
        const ids = {};
        for (const attr of testIdAttributes) {
            const value = node.getAttribute(attr);
            if (value) ids[attr] = value;
        }
        return ids;
    }

    function byId(node, id) {
        const root = node.getRootNode();
        return root.getElementById ? root.getElementById(id) : document.getElementById(id);
    }

    function label(node) {
        const aria = node.getAttribute('aria-label');
        if (aria && aria.trim()) return collapse(aria);
        const labelledBy = node.getAttribute('aria-labelledby');
        if (labelledBy) {
            const text = labelledBy.split(/\s+/)
                .map(id => byId(node, id))
                .filter(Boolean)
                .map(n => collapse(n.textContent))
                .join(' ');
            if (text) return text;
        }
        return null;
    }

    function role(node) {
        const explicit = node.getAttribute('role');
        if (explicit && explicit.trim()) return explicit.trim().split(/\s+/)[0];
        const tag = node.tagName.toLowerCase();
        switch (tag) {
            case 'button': return 'button';
            case 'a': case 'area': return node.hasAttribute('href') ? 'link' : null;
            case 'select': return (node.multiple || node.size > 1) ? 'listbox' : 'combobox';
            case 'textarea': return 'textbox';
            case 'img': return node.getAttribute('alt') === '' ? 'presentation' : 'img';
            case 'h1': case 'h2': case 'h3': case 'h4': case 'h5': case 'h6': return 'heading';
            case 'ul': case 'ol': return 'list';
            case 'li': return 'listitem';
            case 'table': return 'table';
            case 'option': return 'option';
            case 'input': {
                const type = (node.getAttribute('type') || 'text').toLowerCase();
                if (['button', 'submit', 'reset', 'image'].includes(type)) return 'button';
                if (type === 'checkbox') return 'checkbox';
                if (type === 'radio') return 'radio';
                if (type === 'range') return 'slider';
                if (type === 'number') return 'spinbutton';
                if (type === 'search') return 'searchbox';
                if (['text', 'email', 'tel', 'url'].includes(type)) return 'textbox';
                return null;
            }
        }
        if (LANDMARKS[tag]) {
            if ((tag === 'section' || tag === 'form') && !label(node)) return null;
            return LANDMARKS[tag];
        }
        return null;
    }

    function accessibleName(node, nodeRole) {
        const labelled = label(node);
        if (labelled) return labelled;
        const tag = node.tagName.toLowerCase();
        if (node.labels && node.labels.length) {
            const text = Array.from(node.labels).map(l => collapse(l.textContent)).join(' ');
            if (text) return text;
        }
        if (tag === 'input') {
            const type = (node.getAttribute('type') || 'text').toLowerCase();
            if (['button', 'submit', 'reset'].includes(type) && node.value) return collapse(node.value);
            if (type === 'image' && node.getAttribute('alt')) return collapse(node.getAttribute('alt'));
        }
        if (tag === 'img' && node.getAttribute('alt')) return collapse(node.getAttribute('alt'));
        if (nodeRole && NAME_FROM_CONTENT.has(nodeRole)) {
            const text = collapse(node.textContent);
            if (text) return text;
        }
        const title = node.getAttribute('title');
        if (title && title.trim()) return collapse(title);
        const placeholder = node.getAttribute('placeholder');
        if (placeholder && placeholder.trim()) return collapse(placeholder);
        return null;
    }

    function position(node) {
        const parent = node.parentNode;
        if (!parent || !parent.children) return { nth: 1, total: 1 };
        const same = Array.from(parent.children).filter(c => c.tagName === node.tagName);
        return { nth: same.indexOf(node) + 1, total: same.length };
    }

    const ancestors = [];
    for (let node = el.parentElement; node; node = node.parentElement) {
        ancestors.push({
            tag: node.tagName.toLowerCase(),
            id: node.id || null,
            test_ids: testIds(node),
            role: role(node),
            role_attribute: node.hasAttribute('role'),
            label: label(node),
        });
    }

    const shadowHosts = [];
    for (let root = el.getRootNode(); root instanceof ShadowRoot; root = root.host.getRootNode()) {
        shadowHosts.unshift({ tag: root.host.tagName.toLowerCase(), id: root.host.id || null });
    }

    const path = [];
    for (let node = el; node; node = node.parentElement) {
        const pos = position(node);
        path.push({
            tag: node.tagName.toLowerCase(),
            id: node.id || null,
            test_ids: testIds(node),
            name: node.getAttribute('name'),
            nth_of_type: pos.nth,
            same_tag_siblings: pos.total,
        });
    }

    const elementRole = role(el);
    return {
        connected: el.isConnected,
        tag: el.tagName.toLowerCase(),
        id: el.id || null,
        test_ids: testIds(el),
        name: el.getAttribute('name'),
        placeholder: el.getAttribute('placeholder'),
        type: el.getAttribute('type'),
        class_name: el.getAttribute('class') || '',
        role: elementRole,
        accessible_name: accessibleName(el, elementRole),
        text: collapse(el.innerText || el.textContent).slice(0, maxText),
        ancestors: ancestors,
        shadow_hosts: shadowHosts,
        path: path,
    };
}
'''


def is_stable_id(value: Optional[str], patterns: Iterable[Pattern[str]] = DYNAMIC_ID_PATTERNS) -> bool:
    """
    Check whether an id looks hand-written rather than generated.

    Examples:
        >>> is_stable_id("login-button")
        True
        >>> is_stable_id("a1b2c3d4e5")
        False
    """
    if not value or not value.strip() or any(c.isspace() for c in value):
        return False
    return not any(p.search(value) for p in patterns)


def filter_stable_classes(
    class_string: Optional[str],
    patterns: Iterable[Pattern[str]] = DYNAMIC_CLASS_PATTERNS,
    max_classes: int = MAX_STABLE_CLASSES,
) -> List[str]:
    """
    Keep the first few class tokens that do not look hashed.

    Args:
        class_string: Space-separated class names
        patterns: Hashed-class patterns
        max_classes: Maximum number of classes to keep

    Returns:
        Surviving classes, in document order
    """
    if not class_string:
        return []
    patterns = list(patterns)

    kept: List[str] = []
    for cls in class_string.split():
        if any(p.search(cls) for p in patterns):
            continue
        # Tailwind-style tokens (w-1/2, hover:bg-x) are not valid bare CSS classes
        if not re.match(r"^-?[A-Za-z_][A-Za-z0-9_-]*$", cls):
            continue
        if cls not in kept:
            kept.append(cls)
        if len(kept) >= max_classes:
            break
    return kept


class SignalCollector:
    """
    Gather ElementSignals from a live element.

    Usage:
        collector = SignalCollector(capability)
        signals = await collector.collect(resolved.element)
    """

    def __init__(
        self,
        capability: IPageCapability,
        test_id_attributes: Sequence[str] = TEST_ID_ATTRIBUTES,
        id_patterns: Sequence[Pattern[str]] = DYNAMIC_ID_PATTERNS,
        class_patterns: Sequence[Pattern[str]] = DYNAMIC_CLASS_PATTERNS,
        structural_roles: Iterable[str] = STRUCTURAL_ROLES,
        max_classes: int = MAX_STABLE_CLASSES,
        max_text_length: int = MAX_TEXT_LENGTH,
    ):
        self._capability = capability
        self.test_id_attributes = list(test_id_attributes)
        self.id_patterns = list(id_patterns)
        self.class_patterns = list(class_patterns)
        self.structural_roles = frozenset(structural_roles)
        self.max_classes = max_classes
        self.max_text_length = max_text_length

    async def collect(self, element: Any) -> ElementSignals:
        """
        Read identity signals from an element.

        Raises:
            ElementNotFoundError: If the element is detached or cannot be read
        """
        arg = {"testIdAttributes": self.test_id_attributes, "maxText": self.max_text_length}
        try:
            raw = await self._capability.evaluate(element, COLLECT_SIGNALS_JS, arg)
        except Exception as e:
            raise ElementNotFoundError(f"Element could not be inspected: {e}") from e

        if not raw or not raw.get("connected", False):
            raise ElementNotFoundError("Element is no longer attached to the document")

        signals = self.parse(raw)
        logger.debug(
            f"Signals for <{signals.tag}>: id={signals.element_id!r} stable={signals.id_is_stable} "
            f"test_ids={signals.test_ids} role={signals.role} anchor={signals.anchor} "
            f"shadow={signals.shadow_chain}"
        )
        return signals

    def parse(self, raw: Dict[str, Any]) -> ElementSignals:
        """Turn the raw facts returned by the page into ElementSignals."""
        element_id = raw.get("id") or None
        text = (raw.get("text") or "")[: self.max_text_length]
        class_name = raw.get("class_name") or ""

        return ElementSignals(
            tag=(raw.get("tag") or "*").lower(),
            element_id=element_id,
            id_is_stable=self.is_stable_id(element_id),
            test_ids=self._ordered_test_ids(raw.get("test_ids") or {}),
            name=raw.get("name") or None,
            role=raw.get("role") or None,
            accessible_name=raw.get("accessible_name") or None,
            placeholder=raw.get("placeholder") or None,
            input_type=raw.get("type") or None,
            class_name=class_name,
            stable_classes=self.stable_classes(class_name),
            text=text,
            anchor=self.find_anchor(raw.get("ancestors") or []),
            shadow_chain=self.shadow_chain(raw.get("shadow_hosts") or []),
            path=[self._path_node(node) for node in raw.get("path") or []],
        )

    def is_stable_id(self, value: Optional[str]) -> bool:
        return is_stable_id(value, self.id_patterns)

    def stable_classes(self, class_string: Optional[str]) -> List[str]:
        return filter_stable_classes(class_string, self.class_patterns, self.max_classes)

    def find_anchor(self, ancestors: List[Dict[str, Any]]) -> Optional[str]:
        """
        Selector for the nearest stable ancestor, closest first.

        Args:
            ancestors: Ancestor summaries from the parent up to the root

        Returns:
            Anchor selector, or None when no ancestor qualifies
        """
        for node in ancestors:
            node_id = node.get("id")
            if node_id and self.is_stable_id(node_id):
                return syntax.id_selector(node_id)

            test_ids = self._ordered_test_ids(node.get("test_ids") or {})
            if test_ids:
                attr, value = next(iter(test_ids.items()))
                return syntax.attribute(attr, value)

            role = node.get("role")
            label = node.get("label")
            if role in self.structural_roles and label:
                return syntax.role_selector(role, label)
        return None

    def shadow_chain(self, hosts: List[Dict[str, Any]]) -> List[str]:
        """Host selectors from the outermost shadow host inwards."""
        chain = []
        for host in hosts:
            host_id = host.get("id")
            chain.append(syntax.id_selector(host_id) if host_id else host["tag"])
        return chain

    def _ordered_test_ids(self, test_ids: Dict[str, str]) -> Dict[str, str]:
        return {
            attr: test_ids[attr]
            for attr in self.test_id_attributes
            if test_ids.get(attr)
        }

    def _path_node(self, node: Dict[str, Any]) -> PathNode:
        return PathNode(
            tag=(node.get("tag") or "*").lower(),
            element_id=node.get("id") or None,
            test_ids=self._ordered_test_ids(node.get("test_ids") or {}),
            name=node.get("name") or None,
            nth_of_type=int(node.get("nth_of_type") or 1),
            same_tag_siblings=int(node.get("same_tag_siblings") or 1),
        )
