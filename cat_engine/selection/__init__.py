"""Item selection: one strategy per criterion, looked up by name."""

from cat_engine.selection.base import Selection, Selector
from cat_engine.selection.registry import SELECTORS, available_criteria, get_selector, register_selector
from cat_engine.selection import strategies  # noqa: F401  (registers the built-in criteria)

__all__ = [
    "Selection",
    "Selector",
    "SELECTORS",
    "available_criteria",
    "get_selector",
    "register_selector",
]
