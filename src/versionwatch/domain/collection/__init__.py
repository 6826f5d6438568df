"""Multi-source collection: per-product source chains and their concurrent orchestration."""

from __future__ import annotations

from .chain import (
    STATIC_SOURCE_NAME,
    ChainResult,
    ChainState,
    SourceAttempt,
    SourceChain,
    canonical_cycles,
)
from .orchestrator import CollectedCallback, CollectionOrchestrator
from .outcome import CollectionOutcome, ProductCollection
from .report import HealthStatus, ProductReport, RunReport, build_run_report, volume_category

__all__ = [
    "STATIC_SOURCE_NAME",
    "ChainResult",
    "ChainState",
    "CollectedCallback",
    "CollectionOrchestrator",
    "CollectionOutcome",
    "HealthStatus",
    "ProductCollection",
    "ProductReport",
    "RunReport",
    "SourceAttempt",
    "SourceChain",
    "build_run_report",
    "canonical_cycles",
    "volume_category",
]
