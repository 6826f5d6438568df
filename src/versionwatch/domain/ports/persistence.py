"""Ports for persisting the product catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from versionwatch.domain.model import Cycle, Product, ProductCycle, ProductInfo


class PersistenceError(RuntimeError):
    """Storage-layer failure other than an expected unique-constraint conflict."""


class CycleConflictError(PersistenceError):
    """A concurrent writer inserted the same ``(product_id, name)`` cycle first."""


@runtime_checkable
class ProductRepository(Protocol):
    """Persistence contract for products."""

    def get_by_name(self, name: str) -> Product | None: ...

    def upsert_product(self, info: ProductInfo) -> int:
        """Insert or enrich the product and return its id."""
        ...


@runtime_checkable
class CycleRepository(Protocol):
    """Persistence contract for release cycles."""

    def for_product(self, product_id: int) -> dict[str, Cycle]: ...

    def upsert_cycles(self, product_id: int, cycles: Sequence[ProductCycle]) -> int:
        """Insert new cycles and enrich existing ones; return the number inserted."""
        ...
