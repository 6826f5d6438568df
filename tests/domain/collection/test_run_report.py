from __future__ import annotations

import pytest

from versionwatch.domain.collection import (
    CollectionOutcome,
    HealthStatus,
    build_run_report,
    volume_category,
)
from versionwatch.domain.model import OutcomeStatus
from versionwatch.domain.reconciliation import ReconciliationResult


def outcome(product: str, status: OutcomeStatus, count: int = 0) -> CollectionOutcome:
    return CollectionOutcome(product=product, status=status, cycle_count=count)


def reconciled(product: str) -> ReconciliationResult:
    return ReconciliationResult(
        product=product,
        products_inserted=1,
        products_updated=0,
        cycles_inserted=3,
        cycles_updated=0,
    )


@pytest.mark.parametrize(
    ("count", "category"),
    [
        (0, "No Data"),
        (1, "Low Volume"),
        (10, "Low Volume"),
        (11, "Medium Volume"),
        (50, "Medium Volume"),
        (200, "High Volume"),
        (201, "Very High Volume"),
    ],
)
def test_volume_category_buckets(count: int, category: str) -> None:
    assert volume_category(count) == category


def test_success_rate_ignores_skipped_products() -> None:
    report = build_run_report(
        [
            outcome("a", OutcomeStatus.SUCCEEDED, 20),
            outcome("b", OutcomeStatus.DEGRADED, 5),
            outcome("c", OutcomeStatus.FAILED_NO_DATA),
            outcome("d", OutcomeStatus.FAILED),
            outcome("e", OutcomeStatus.SKIPPED),
        ]
    )

    assert [p.product for p in report.attempted] == ["a", "b", "c", "d"]
    assert [p.product for p in report.successful] == ["a", "b"]
    assert report.success_rate == pytest.approx(50.0)
    assert report.total_versions == 25
    assert report.overall_status is HealthStatus.CRITICAL


def test_empty_report_is_critical_with_zero_rate() -> None:
    report = build_run_report([])

    assert report.success_rate == 0.0
    assert report.overall_status is HealthStatus.CRITICAL
    assert report.anomalies == []
    assert not report.persistence_unreachable


@pytest.mark.parametrize(
    ("failures", "status"),
    [
        (0, HealthStatus.HEALTHY),
        (1, HealthStatus.HEALTHY),
        (2, HealthStatus.WARNING),
        (4, HealthStatus.CRITICAL),
    ],
)
def test_overall_status_thresholds(failures: int, status: HealthStatus) -> None:
    outcomes = [outcome(f"ok-{i}", OutcomeStatus.SUCCEEDED, 5) for i in range(10 - failures)]
    outcomes += [outcome(f"bad-{i}", OutcomeStatus.FAILED_NO_DATA) for i in range(failures)]

    assert build_run_report(outcomes).overall_status is status


def test_anomalies_are_products_far_below_average() -> None:
    report = build_run_report(
        [
            outcome("big", OutcomeStatus.SUCCEEDED, 100),
            outcome("also-big", OutcomeStatus.SUCCEEDED, 80),
            outcome("tiny", OutcomeStatus.DEGRADED, 3),
            outcome("none", OutcomeStatus.FAILED_NO_DATA),
        ]
    )

    assert report.anomalies == ["tiny"]


def test_persistence_unreachable_only_when_every_reconciliation_failed() -> None:
    outcomes = [outcome("a", OutcomeStatus.SUCCEEDED, 3), outcome("b", OutcomeStatus.SUCCEEDED, 3)]

    all_failed = build_run_report(outcomes, persistence_errors={"a": "down", "b": "down"})
    one_failed = build_run_report(
        outcomes, reconciliations={"a": reconciled("a")}, persistence_errors={"b": "down"}
    )
    none_tried = build_run_report(outcomes)

    assert all_failed.persistence_unreachable
    assert not one_failed.persistence_unreachable
    assert not none_tried.persistence_unreachable


def test_report_serializes_products_in_order() -> None:
    report = build_run_report(
        [
            outcome("demo", OutcomeStatus.SUCCEEDED, 3),
            outcome("ghost", OutcomeStatus.FAILED_NO_DATA),
        ],
        reconciliations={"demo": reconciled("demo")},
        persistence_errors={"ghost": "boom"},
        elapsed=1.23456,
    )

    payload = report.to_dict()

    assert payload["overall_status"] == "Critical"
    assert payload["success_rate"] == 50.0
    assert payload["elapsed"] == 1.235
    assert payload["counts"]["succeeded"] == 1
    assert payload["counts"]["failed_no_data"] == 1
    assert [entry["product"] for entry in payload["products"]] == ["demo", "ghost"]
    assert payload["products"][0]["reconciliation"]["cycles_inserted"] == 3
    assert payload["products"][0]["volume_category"] == "Low Volume"
    assert payload["products"][1]["persistence_error"] == "boom"
    assert "reconciliation" not in payload["products"][1]
