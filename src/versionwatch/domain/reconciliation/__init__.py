"""Enrichment-only reconciliation of collected cycles against persisted state."""

from __future__ import annotations

from .engine import ReconciliationResult, Reconciler
from .enrichment import apply_enrichment, cycle_enrichment, product_enrichment
from .plan import CycleChange, ReconciliationPlan, plan_reconciliation

__all__ = [
    "CycleChange",
    "ReconciliationPlan",
    "ReconciliationResult",
    "Reconciler",
    "apply_enrichment",
    "cycle_enrichment",
    "plan_reconciliation",
    "product_enrichment",
]
