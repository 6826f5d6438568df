from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import inspect, select

from versionwatch.adapters.sqlalchemy import (
    SqlAlchemyCycleRepository,
    SqlAlchemyProductRepository,
)
from versionwatch.domain.model import Cycle, ProductCycle, ProductInfo

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_migrations_create_catalog_schema(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert {"products", "cycles"} <= set(inspector.get_table_names())
    unique = inspector.get_unique_constraints("cycles")
    assert [constraint["column_names"] for constraint in unique] == [["product_id", "name"]]


def test_upsert_product_inserts_then_returns_same_id(sqlite_session: Session) -> None:
    products = SqlAlchemyProductRepository(sqlite_session)

    first = products.upsert_product(ProductInfo(name="node", display_name="Node.js"))
    second = products.upsert_product(ProductInfo(name="node"))

    assert first == second
    stored = products.get_by_name("node")
    assert stored is not None
    assert stored.display_name == "Node.js"
    assert stored.created_at is not None


def test_upsert_product_enriches_missing_description(sqlite_session: Session) -> None:
    products = SqlAlchemyProductRepository(sqlite_session)
    products.upsert_product(ProductInfo(name="go"))

    products.upsert_product(
        ProductInfo(name="go", display_name="Go", homepage="https://go.dev")
    )

    stored = products.get_by_name("go")
    assert stored is not None
    assert (stored.display_name, stored.homepage) == ("Go", "https://go.dev")


def test_upsert_cycles_counts_inserts_and_enriches_existing(sqlite_session: Session) -> None:
    product_id = SqlAlchemyProductRepository(sqlite_session).upsert_product(
        ProductInfo(name="rust")
    )
    cycles = SqlAlchemyCycleRepository(sqlite_session)

    inserted = cycles.upsert_cycles(
        product_id, [ProductCycle("1.75.0"), ProductCycle("1.76.0", lts=None)]
    )
    again = cycles.upsert_cycles(
        product_id,
        [
            ProductCycle("1.75.0", release_date=date(2023, 12, 28)),
            ProductCycle("1.76.0", release_date=None),
            ProductCycle("1.77.0"),
        ],
    )
    sqlite_session.commit()

    assert inserted == 2
    assert again == 1
    stored = cycles.for_product(product_id)
    assert set(stored) == {"1.75.0", "1.76.0", "1.77.0"}
    assert stored["1.75.0"].release_date == date(2023, 12, 28)
    assert stored["1.76.0"].lts is False


def test_upsert_cycles_keeps_stored_values_when_incoming_is_unknown(
    sqlite_session: Session,
) -> None:
    product_id = SqlAlchemyProductRepository(sqlite_session).upsert_product(
        ProductInfo(name="nodejs")
    )
    cycles = SqlAlchemyCycleRepository(sqlite_session)
    cycles.upsert_cycles(
        product_id,
        [
            ProductCycle(
                "20.0.0", release_date=date(2023, 4, 18), eol_date=date(2026, 4, 30), lts=True
            )
        ],
    )

    cycles.upsert_cycles(product_id, [ProductCycle("20.0.0")])
    sqlite_session.commit()

    stored = sqlite_session.execute(select(Cycle)).scalar_one()
    assert stored.release_date == date(2023, 4, 18)
    assert stored.eol_date == date(2026, 4, 30)
    assert stored.lts is True
