"""
Module categories (layers) and their processing hierarchy.

A module's category is the last `_`-separated token of its name
(`Orders_CS` -> `CS`). Modules are published lower layers first.
"""

from __future__ import annotations

from typing import Iterable, Optional

from shared.logging import get_logger

logger = get_logger(__name__)

# Processing order, lowest layer first.
PROCESSING_HIERARCHY: tuple[str, ...] = (
    "IS",
    "LS",
    "TH",
    "CS",
    "BL",
    "SBL",
    "OS",
    "API",
    "AP",
    "CW",
    "UI",
)

# Unrecognized suffixes are treated as front-end modules.
DEFAULT_CATEGORY = "UI"

_RANKS = {code: index for index, code in enumerate(PROCESSING_HIERARCHY)}
_CANONICAL = {code.upper(): code for code in PROCESSING_HIERARCHY}


def category_rank(code: str) -> int:
    """Position in the hierarchy; codes outside it rank after every known code."""
    return _RANKS.get(code, len(PROCESSING_HIERARCHY))


def category_from_name(name: str) -> str:
    """
    Derive the category code from a module name.

    Unknown suffixes are coerced to DEFAULT_CATEGORY and logged.
    """
    suffix = name.split("_")[-1]
    if suffix in _RANKS:
        return suffix
    logger.info(
        "category.unknown_suffix",
        suffix=suffix,
        module_name=name,
        coerced_to=DEFAULT_CATEGORY,
    )
    return DEFAULT_CATEGORY


def normalize_categories(categories: Optional[Iterable[str]]) -> Optional[tuple[str, ...]]:
    """
    Canonical codes from `categories` in first-seen order, duplicates dropped.

    Matching is case-insensitive against the hierarchy. Returns None (no
    filtering) when `categories` is None, or when none of its entries is a
    known category, which is logged as a warning.
    """
    if categories is None:
        return None
    if isinstance(categories, str):
        categories = categories.split(",")
    requested = [str(code) for code in categories]

    selected: list[str] = []
    for token in requested:
        code = _CANONICAL.get(token.strip().upper())
        if code and code not in selected:
            selected.append(code)

    if not selected:
        logger.warning(
            "category.filter_ignored",
            requested=requested,
            available=", ".join(PROCESSING_HIERARCHY),
            reason="no_valid_categories",
        )
        return None

    logger.info("category.filter_applied", categories=selected)
    return tuple(selected)


def parse_requested_categories(arg: Optional[str]) -> Optional[tuple[str, ...]]:
    """Parse a comma-separated CLI layer list; absent or blank means no filtering."""
    if arg is None or not arg.strip():
        return None
    return normalize_categories(arg.split(","))
