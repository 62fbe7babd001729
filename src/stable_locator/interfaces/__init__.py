"""
Interfaces module - Abstract base classes for pluggable components.

This module defines the contract a browser adapter must implement for the
resolution engine to drive it.
"""

from stable_locator.interfaces.page import (
    IPageCapability,
    ElementQuery,
    QueryKind,
)

__all__ = [
    "IPageCapability",
    "ElementQuery",
    "QueryKind",
]
