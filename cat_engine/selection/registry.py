"""Lookup of selection strategies by criterion name."""

import logging

from cat_engine.core.errors import UnknownCriterionError
from cat_engine.selection.base import Selector

logger = logging.getLogger(__name__)

SELECTORS: dict[str, type[Selector]] = {}


def register_selector(cls: type[Selector]) -> type[Selector]:
    """
    Register a selector class under its criterion name.

    Raises:
        ValueError: If the name is already taken
    """
    key = cls.name.upper()
    if key in SELECTORS:
        raise ValueError(f"Selection criterion already registered: {key}")
    SELECTORS[key] = cls
    return cls


def get_selector(name: str, **kwargs) -> Selector:
    """
    Instantiate the selector registered for a criterion name.

    Args:
        name: Criterion name (case-insensitive), e.g. "MFI"
        **kwargs: Passed to the selector's constructor

    Raises:
        UnknownCriterionError: If no selector is registered under name
    """
    try:
        cls = SELECTORS[name.upper()]
    except KeyError:
        logger.warning(f"Unknown selection criterion: {name}")
        raise UnknownCriterionError(
            f"Unknown selection criterion: {name}",
            details={"available": available_criteria()},
        ) from None
    return cls(**kwargs)


def available_criteria() -> list[str]:
    """Registered criterion names."""
    return sorted(SELECTORS)
