"""Run-level summary of collection and reconciliation outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from versionwatch.domain.model import OutcomeStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from versionwatch.domain.collection.outcome import CollectionOutcome
    from versionwatch.domain.reconciliation import ReconciliationResult

ANOMALY_RATIO = 0.3
HEALTHY_SUCCESS_RATE = 90.0
WARNING_SUCCESS_RATE = 70.0


class HealthStatus(StrEnum):
    HEALTHY = "Healthy"
    WARNING = "Warning"
    CRITICAL = "Critical"


def volume_category(version_count: int) -> str:
    """Bucket a product by how many versions it reported."""

    if version_count == 0:
        return "No Data"
    if version_count <= 10:  # noqa: PLR2004
        return "Low Volume"
    if version_count <= 50:  # noqa: PLR2004
        return "Medium Volume"
    if version_count <= 200:  # noqa: PLR2004
        return "High Volume"
    return "Very High Volume"


@dataclass(slots=True)
class ProductReport:
    outcome: CollectionOutcome
    reconciliation: ReconciliationResult | None = None
    persistence_error: str | None = None

    @property
    def product(self) -> str:
        return self.outcome.product

    @property
    def volume_category(self) -> str:
        return volume_category(self.outcome.cycle_count)


@dataclass(slots=True)
class RunReport:
    """Summary of one run, in target order."""

    products: list[ProductReport] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def attempted(self) -> list[ProductReport]:
        return [p for p in self.products if p.outcome.status is not OutcomeStatus.SKIPPED]

    @property
    def successful(self) -> list[ProductReport]:
        return [p for p in self.products if p.outcome.has_data]

    @property
    def success_rate(self) -> float:
        attempted = len(self.attempted)
        if attempted == 0:
            return 0.0
        return len(self.successful) / attempted * 100.0

    @property
    def total_versions(self) -> int:
        return sum(p.outcome.cycle_count for p in self.products)

    @property
    def anomalies(self) -> list[str]:
        """Products reporting data, but well below the average version count."""

        counts = [p.outcome.cycle_count for p in self.attempted]
        if not counts:
            return []
        average = sum(counts) / len(counts)
        return [
            p.product
            for p in self.attempted
            if 0 < p.outcome.cycle_count < average * ANOMALY_RATIO
        ]

    @property
    def overall_status(self) -> HealthStatus:
        rate = self.success_rate
        if rate >= HEALTHY_SUCCESS_RATE:
            return HealthStatus.HEALTHY
        if rate >= WARNING_SUCCESS_RATE:
            return HealthStatus.WARNING
        return HealthStatus.CRITICAL

    @property
    def persistence_unreachable(self) -> bool:
        """True when every attempted reconciliation failed in the storage layer."""

        tried = [
            p
            for p in self.products
            if p.reconciliation is not None or p.persistence_error is not None
        ]
        return bool(tried) and all(p.persistence_error is not None for p in tried)

    def counts(self) -> dict[OutcomeStatus, int]:
        counts = dict.fromkeys(OutcomeStatus, 0)
        for product in self.products:
            counts[product.outcome.status] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_status": str(self.overall_status),
            "success_rate": round(self.success_rate, 1),
            "total_versions": self.total_versions,
            "anomalies": self.anomalies,
            "elapsed": round(self.elapsed, 3),
            "counts": {str(status): count for status, count in self.counts().items()},
            "products": [_product_dict(product) for product in self.products],
        }


def build_run_report(
    outcomes: Iterable[CollectionOutcome],
    *,
    reconciliations: Mapping[str, ReconciliationResult] | None = None,
    persistence_errors: Mapping[str, str] | None = None,
    elapsed: float = 0.0,
) -> RunReport:
    reconciliations = reconciliations or {}
    persistence_errors = persistence_errors or {}
    return RunReport(
        products=[
            ProductReport(
                outcome=outcome,
                reconciliation=reconciliations.get(outcome.product),
                persistence_error=persistence_errors.get(outcome.product),
            )
            for outcome in outcomes
        ],
        elapsed=elapsed,
    )


def _product_dict(report: ProductReport) -> dict[str, Any]:
    outcome = report.outcome
    entry: dict[str, Any] = {
        "product": outcome.product,
        "status": str(outcome.status),
        "source": outcome.source_name,
        "tier_index": outcome.tier_index,
        "cycle_count": outcome.cycle_count,
        "volume_category": report.volume_category,
        "elapsed": round(outcome.elapsed, 3),
        "error": outcome.error,
        "attempts": [
            {
                "source": attempt.source,
                "error_kind": str(attempt.error_kind) if attempt.error_kind else None,
                "detail": attempt.detail,
            }
            for attempt in outcome.attempts
        ],
    }
    if report.reconciliation is not None:
        result = report.reconciliation
        entry["reconciliation"] = {
            "products_inserted": result.products_inserted,
            "products_updated": result.products_updated,
            "cycles_inserted": result.cycles_inserted,
            "cycles_updated": result.cycles_updated,
        }
    if report.persistence_error is not None:
        entry["persistence_error"] = report.persistence_error
    return entry
