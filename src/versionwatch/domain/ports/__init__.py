"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    CycleConflictError,
    CycleRepository,
    PersistenceError,
    ProductRepository,
)
from .sources import (
    EmptyResponseError,
    ParseFailureError,
    RateLimitedError,
    SourceError,
    TransportError,
    VersionSource,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CycleConflictError",
    "CycleRepository",
    "EmptyResponseError",
    "ParseFailureError",
    "PersistenceError",
    "ProductRepository",
    "RateLimitedError",
    "RepositoryCollection",
    "SourceError",
    "TransportError",
    "UnitOfWork",
    "VersionSource",
]
