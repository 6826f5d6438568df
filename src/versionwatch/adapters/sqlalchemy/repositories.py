"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select

from versionwatch.adapters.sqlalchemy.mappings import cycles_table, products_table
from versionwatch.domain.model import Cycle, Product
from versionwatch.domain.reconciliation import (
    apply_enrichment,
    cycle_enrichment,
    product_enrichment,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session

    from versionwatch.domain.model import ProductCycle, ProductInfo


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SqlAlchemyProductRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_name(self, name: str) -> Product | None:
        stmt = select(Product).where(products_table.c.name == name)
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert_product(self, info: ProductInfo) -> int:
        now = _utcnow()
        product = self.get_by_name(info.name)
        if product is None:
            product = Product(
                name=info.name,
                display_name=info.display_name,
                homepage=info.homepage,
                documentation_url=info.documentation_url,
                created_at=now,
                updated_at=now,
            )
            self.session.add(product)
        elif apply_enrichment(product, product_enrichment(product, info)):
            product.updated_at = now
        self.session.flush()
        if product.id is None:
            raise RuntimeError(f"Product {info.name!r} has no id after flush")
        return product.id


class SqlAlchemyCycleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def for_product(self, product_id: int) -> dict[str, Cycle]:
        stmt = select(Cycle).where(cycles_table.c.product_id == product_id)
        return {cycle.name: cycle for cycle in self.session.execute(stmt).scalars()}

    def upsert_cycles(self, product_id: int, cycles: Sequence[ProductCycle]) -> int:
        """Insert unseen cycles and enrich stored ones; a stored value is never nulled.

        A new cycle whose LTS status is unknown is stored as non-LTS.
        """

        now = _utcnow()
        stored_by_name = self.for_product(product_id)
        inserted = 0
        for cycle in cycles:
            stored = stored_by_name.get(cycle.name)
            if stored is None:
                stored = Cycle(
                    product_id=product_id,
                    name=cycle.name,
                    release_date=cycle.release_date,
                    eol_date=cycle.eol_date,
                    lts=bool(cycle.lts),
                    created_at=now,
                    updated_at=now,
                )
                self.session.add(stored)
                stored_by_name[cycle.name] = stored
                inserted += 1
            elif apply_enrichment(stored, cycle_enrichment(stored, cycle)):
                stored.updated_at = now
        self.session.flush()
        return inserted
