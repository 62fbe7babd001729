"""
Helpers for writing selector expressions understood by Playwright.

Candidates mix plain CSS with Playwright's ``role=`` engine, the
``:text-is()`` pseudo-class and the ``>>`` chaining combinator, which also
crosses open shadow roots.
"""

import re
from typing import Iterable, Optional

CHAIN_COMBINATOR = " >> "

_CSS_IDENT = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")


def quote(value: str) -> str:
    """Double-quote a value for use inside an attribute or pseudo-class."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")
    return f'"{escaped}"'


def attribute(name: str, value: str, tag: str = "") -> str:
    """``tag[name="value"]``"""
    return f"{tag}[{name}={quote(value)}]"


def id_selector(element_id: str) -> str:
    """``#id`` for plain identifiers, ``[id="..."]`` otherwise."""
    if _CSS_IDENT.match(element_id):
        return f"#{element_id}"
    return attribute("id", element_id)


def role_selector(role: str, name: Optional[str] = None) -> str:
    if name is None:
        return f"role={role}"
    return f"role={role}[name={quote(name)}]"


def text_selector(tag: str, text: str) -> str:
    return f"{tag}:text-is({quote(text)})"


def class_selector(tag: str, classes: Iterable[str]) -> str:
    return tag + "".join(f".{c}" for c in classes)


def scoped(outer: str, inner: str) -> str:
    """
    Restrict ``inner`` to descendants of ``outer``.

    Plain CSS scopes use the descendant combinator; anything using a
    Playwright engine has to be chained instead.
    """
    if outer.startswith("role=") or CHAIN_COMBINATOR.strip() in outer or inner.startswith("role="):
        return f"{outer}{CHAIN_COMBINATOR}{inner}"
    return f"{outer} {inner}"


def pierce(chain: Iterable[str], selector: str, combinator: str = CHAIN_COMBINATOR) -> str:
    """Prefix a selector with shadow hosts, outermost first."""
    parts = list(chain)
    if not parts:
        return selector
    return combinator.join(parts + [selector])
