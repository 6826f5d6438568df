"""SQLAlchemy adapter package for versionwatch."""

from __future__ import annotations

from .mappings import (
    cycles_table,
    mapper_registry,
    products_table,
    start_mappers,
)
from .repositories import SqlAlchemyCycleRepository, SqlAlchemyProductRepository
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyCycleRepository",
    "SqlAlchemyProductRepository",
    "StartupError",
    "cycles_table",
    "mapper_registry",
    "products_table",
    "shutdown",
    "start_mappers",
    "startup",
]
