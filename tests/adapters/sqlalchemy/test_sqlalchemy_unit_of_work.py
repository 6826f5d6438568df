from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from versionwatch.adapters.sqlalchemy import SqlAlchemyCatalogUnitOfWork, StartupError, startup
from versionwatch.adapters.sqlalchemy.unit_of_work import is_started, shutdown
from versionwatch.domain.model import Product, ProductInfo
from versionwatch.domain.ports import CycleConflictError, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sqlalchemy.engine import Engine


def _product(name: str) -> Product:
    now = datetime.now(UTC)
    return Product(name=name, created_at=now, updated_at=now)


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError):
        SqlAlchemyCatalogUnitOfWork()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        assert is_started()
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
    finally:
        shutdown()
    assert not is_started()


def test_startup_against_unreachable_database_raises_persistence_error() -> None:
    shutdown()
    engine = create_engine("sqlite+pysqlite:////nonexistent-dir/versionwatch.db")

    with pytest.raises(PersistenceError, match="Database unavailable"):
        startup(engine=engine, force=True)
    assert not is_started()


def test_uncommitted_work_is_rolled_back(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.products.upsert_product(ProductInfo(name="kong"))

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.products.get_by_name("kong") is None


def test_unique_violation_becomes_conflict(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.products.upsert_product(ProductInfo(name="caddy"))
        uow.commit()

    with pytest.raises(CycleConflictError), sqlite_unit_of_work() as uow:
        uow.session.add(_product("caddy"))
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.products.get_by_name("caddy") is not None


def test_session_is_released_after_exit(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    uow = sqlite_unit_of_work()
    with uow:
        pass

    with pytest.raises(StartupError):
        _ = uow.repositories


def _store_from_worker_thread(name: str) -> int:
    def store() -> int:
        with SqlAlchemyCatalogUnitOfWork() as uow:
            product_id = uow.repositories.products.upsert_product(ProductInfo(name=name))
            uow.commit()
            return product_id

    with ThreadPoolExecutor(max_workers=1) as worker:
        return worker.submit(store).result()


@pytest.mark.parametrize("database", ["file", "memory"])
def test_started_catalog_is_usable_from_a_worker_thread(tmp_path: Path, database: str) -> None:
    uri = (
        f"sqlite+pysqlite:///{tmp_path / 'catalog.db'}"
        if database == "file"
        else "sqlite+pysqlite:///:memory:"
    )
    startup(database_uri=uri, force=True)
    try:
        product_id = _store_from_worker_thread("caddy")

        with SqlAlchemyCatalogUnitOfWork() as uow:
            stored = uow.repositories.products.get_by_name("caddy")
            assert stored is not None
            assert stored.id == product_id
    finally:
        shutdown()
