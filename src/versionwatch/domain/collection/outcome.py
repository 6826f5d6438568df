"""Per-product results of a collection run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from versionwatch.domain.model import OutcomeStatus

if TYPE_CHECKING:
    from versionwatch.domain.collection.chain import ChainResult, SourceAttempt
    from versionwatch.domain.model import ProductCycle, ProductInfo


@dataclass(frozen=True, slots=True)
class CollectionOutcome:
    product: str
    status: OutcomeStatus
    tier_index: int | None = None
    source_name: str | None = None
    elapsed: float = 0.0
    cycle_count: int = 0
    error: str | None = None
    attempts: tuple[SourceAttempt, ...] = ()

    @property
    def has_data(self) -> bool:
        return self.status in {OutcomeStatus.SUCCEEDED, OutcomeStatus.DEGRADED}

    @classmethod
    def from_chain(cls, product: str, result: ChainResult, *, elapsed: float) -> CollectionOutcome:
        if not result.cycles:
            status = OutcomeStatus.FAILED_NO_DATA
        elif result.used_static:
            status = OutcomeStatus.DEGRADED
        else:
            status = OutcomeStatus.SUCCEEDED
        return cls(
            product=product,
            status=status,
            tier_index=result.tier_index,
            source_name=result.source_name,
            elapsed=elapsed,
            cycle_count=len(result.cycles),
            attempts=result.attempts,
        )


@dataclass(frozen=True, slots=True)
class ProductCollection:
    """Canonical cycles collected for one product together with how they were obtained."""

    product: ProductInfo
    outcome: CollectionOutcome
    cycles: tuple[ProductCycle, ...] = field(default_factory=tuple)
