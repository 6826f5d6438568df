"""Version identifier normalization and deduplication."""

from __future__ import annotations

from .deduplicate import deduplicate
from .normalize import NormalizedVersion, VersionKey, normalize, sort_cycles

__all__ = [
    "NormalizedVersion",
    "VersionKey",
    "deduplicate",
    "normalize",
    "sort_cycles",
]
