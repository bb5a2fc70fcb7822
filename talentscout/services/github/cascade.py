"""Ordered fallback strategies for extracting one field from drifting markup.

A cascade is a tuple of pure functions tried in order; the first non-empty
result wins. Extractors keep one cascade per field in a module-level table so
a new selector is added by appending a strategy, never by editing call sites.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TypeVar

from bs4 import Tag

from talentscout.logging_utils import structured_log
from talentscout.services.github.parser_utils import select_text

logger = logging.getLogger(__name__)

T = TypeVar("T")
Strategy = Callable[[Tag], T | None]


def resolve(
    field_name: str,
    strategies: Sequence[Strategy[T]],
    root: Tag,
) -> T | None:
    for index, strategy in enumerate(strategies):
        try:
            value = strategy(root)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            structured_log(
                logger,
                "debug",
                "cascade.strategy_failed",
                field=field_name,
                strategy_index=index,
                error=repr(exc),
            )
            continue
        if value:
            return value
    return None


def resolve_table(
    table: Mapping[str, Sequence[Strategy[object]]],
    root: Tag,
) -> dict[str, object | None]:
    return {field_name: resolve(field_name, strategies, root) for field_name, strategies in table.items()}


def select_all(root: Tag, selectors: Sequence[str]) -> tuple[str | None, list[Tag]]:
    """Return the first selector matching at least one element, with its matches."""
    for selector in selectors:
        elements = root.select(selector)
        if elements:
            return selector, elements
    return None, []


def selector_text(selector: str) -> Strategy[str]:
    def _strategy(root: Tag) -> str | None:
        return select_text(root, selector) or None

    _strategy.__name__ = f"selector_text({selector})"
    return _strategy
