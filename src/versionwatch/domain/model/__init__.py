"""Domain model for tracked products and their release cycles."""

from __future__ import annotations

from .catalog import Cycle, Product
from .enums import ChangeAction, OutcomeStatus, SourceErrorKind
from .versions import ProductCycle, ProductInfo, RawVersionRecord

__all__ = [
    "ChangeAction",
    "Cycle",
    "OutcomeStatus",
    "Product",
    "ProductCycle",
    "ProductInfo",
    "RawVersionRecord",
    "SourceErrorKind",
]
