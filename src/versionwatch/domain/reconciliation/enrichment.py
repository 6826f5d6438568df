"""Enrichment-only merge rules.

A stored value is only ever replaced by a concrete, different incoming value;
``None`` coming from a source means "unknown" and never clears anything.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from versionwatch.domain.model import Cycle, Product, ProductCycle, ProductInfo

PRODUCT_FIELDS = ("display_name", "homepage", "documentation_url")
CYCLE_FIELDS = ("release_date", "eol_date", "lts")


def product_enrichment(persisted: Product, incoming: ProductInfo) -> dict[str, object]:
    """Descriptive fields of ``incoming`` that would change ``persisted``."""

    return _changes(persisted, incoming, PRODUCT_FIELDS)


def cycle_enrichment(persisted: Cycle, incoming: ProductCycle) -> dict[str, object]:
    """Lifecycle fields of ``incoming`` that would change ``persisted``."""

    return _changes(persisted, incoming, CYCLE_FIELDS)


def apply_enrichment(target: object, changes: dict[str, object]) -> bool:
    """Set ``changes`` on ``target``; return whether anything was written."""

    for field_name, value in changes.items():
        setattr(target, field_name, value)
    return bool(changes)


def _changes(persisted: object, incoming: object, fields: tuple[str, ...]) -> dict[str, object]:
    changes: dict[str, object] = {}
    for field_name in fields:
        value = getattr(incoming, field_name)
        if value is None:
            continue
        if getattr(persisted, field_name) != value:
            changes[field_name] = value
    return changes
