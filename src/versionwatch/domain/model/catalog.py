"""Persisted catalog entities: products and their release cycles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, datetime


@dataclass(eq=False, kw_only=True)
class Product:
    """A tracked product, unique by ``name``."""

    id: int | None = None
    name: str
    display_name: str | None = None
    homepage: str | None = None
    documentation_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class Cycle:
    """A stored release cycle, unique per product by ``name``."""

    id: int | None = None
    product_id: int
    name: str
    release_date: date | None = None
    eol_date: date | None = None
    lts: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
