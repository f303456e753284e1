"""Shared utilities for cvmatch."""

from collections.abc import Iterable


def contains_ignore_case(items: Iterable[str], item: str) -> bool:
    """Check whether `item` is in `items`, ignoring case."""
    item_folded = item.casefold()
    return any(existing.casefold() == item_folded for existing in items)


def dedupe_preserving_order(items: Iterable[str]) -> list[str]:
    """Remove exact duplicates while keeping first-seen order."""
    return list(dict.fromkeys(items))
