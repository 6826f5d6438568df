"""SQLAlchemy-backed unit of work for catalog reconciliation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine, event, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from versionwatch.adapters.sqlalchemy.mappings import start_mappers
from versionwatch.adapters.sqlalchemy.migrations import upgrade_head
from versionwatch.adapters.sqlalchemy.repositories import (
    SqlAlchemyCycleRepository,
    SqlAlchemyProductRepository,
)
from versionwatch.config.storage import get_database_uri
from versionwatch.domain.ports import (
    CatalogRepositories,
    CycleConflictError,
    PersistenceError,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection
    from types import TracebackType

    from sqlalchemy.engine import Engine
    from sqlalchemy.pool import ConnectionPoolEntry

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call versionwatch.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: SQLiteConnection, _record: ConnectionPoolEntry) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _create_engine(database_uri: str) -> Engine:
    url = make_url(database_uri)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, future=True)
    # Sessions are opened on the reconcile worker thread, not the one that created them.
    if url.database in {None, "", ":memory:"}:
        return create_engine(
            url,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, future=True, connect_args={"check_same_thread": False})


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, schema, and session factory.

    Any database failure is re-raised as :class:`PersistenceError`.
    """

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    try:
        if engine is None:
            engine = _create_engine(database_uri or get_database_uri())
            _enable_sqlite_foreign_keys(engine)
        start_mappers()
        upgrade_head(engine=engine)
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Database unavailable: {exc}") from exc

    _STATE.engine = engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Storage failures escaping the ``with`` block are re-raised as domain errors:
    unique-constraint violations as :class:`CycleConflictError`, anything else
    from SQLAlchemy as :class:`PersistenceError`.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
            self.session = None

        if isinstance(exc_value, IntegrityError):
            msg = f"Unique constraint violated: {exc_value.orig}"
            raise CycleConflictError(msg) from exc_value
        if isinstance(exc_value, SQLAlchemyError):
            log.error("Database error, transaction rolled back: %s", exc_value)
            raise PersistenceError(str(exc_value)) from exc_value
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    """Unit of work reconciling one product: one session, one transaction."""

    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            products=SqlAlchemyProductRepository(session),
            cycles=SqlAlchemyCycleRepository(session),
        )


if TYPE_CHECKING:
    from versionwatch.domain.ports import CatalogUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
