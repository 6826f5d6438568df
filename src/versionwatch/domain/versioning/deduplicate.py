"""Intra-response deduplication of canonical cycles."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from versionwatch.domain.model import ProductCycle


def deduplicate(cycles: Iterable[ProductCycle]) -> list[ProductCycle]:
    """Collapse cycles sharing a canonical name.

    The surviving entry is the one with strictly more known lifecycle fields; on a
    tie the first-seen entry wins. Names keep their first-seen position.
    """

    survivors: dict[str, ProductCycle] = {}
    for cycle in cycles:
        current = survivors.get(cycle.name)
        if current is None or cycle.known_fields > current.known_fields:
            survivors[cycle.name] = cycle
    return list(survivors.values())
