"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING

from versionwatch.adapters.sources import build_source_chains
from versionwatch.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from versionwatch.config import get_github_config
from versionwatch.domain.collection import CollectionOrchestrator, RunReport, build_run_report
from versionwatch.domain.ports import CatalogUnitOfWork, PersistenceError
from versionwatch.domain.reconciliation import ReconciliationResult, Reconciler

if TYPE_CHECKING:
    from collections.abc import Mapping

    from versionwatch.config import CollectionConfig, GitHubConfig
    from versionwatch.domain.collection import ProductCollection, SourceChain

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def collect_release_history(
    config: CollectionConfig,
    *,
    chains: Mapping[str, SourceChain] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    github: GitHubConfig | None = None,
    shutdown: asyncio.Event | None = None,
) -> RunReport:
    """Collect every enabled target and reconcile each product as soon as it is collected."""

    return asyncio.run(
        collect_release_history_async(
            config,
            chains=chains,
            unit_of_work_factory=unit_of_work_factory,
            github=github,
            shutdown=shutdown,
        )
    )


async def collect_release_history_async(
    config: CollectionConfig,
    *,
    chains: Mapping[str, SourceChain] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    github: GitHubConfig | None = None,
    shutdown: asyncio.Event | None = None,
) -> RunReport:
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyCatalogUnitOfWork
    effective_chains = (
        chains if chains is not None else build_source_chains(github or get_github_config())
    )

    reconciler = Reconciler(unit_of_work_factory)
    reconciliations: dict[str, ReconciliationResult] = {}
    persistence_errors: dict[str, str] = {}

    def reconcile(collection: ProductCollection) -> None:
        name = collection.product.name
        try:
            reconciliations[name] = reconciler.reconcile(collection)
        except PersistenceError as exc:
            log.error("%s: reconciliation failed: %s", name, exc)  # noqa: TRY400
            persistence_errors[name] = str(exc)

    log.info(
        "Starting collection: targets=%d enabled=%d",
        len(config.targets),
        len(config.enabled_targets),
    )
    started = time.perf_counter()
    # One writer thread: catalog transactions never overlap.
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="reconcile") as writer:
        orchestrator = CollectionOrchestrator(
            effective_chains,
            max_in_flight=config.max_in_flight,
            pipeline_timeout=config.pipeline_timeout_seconds,
            executor=writer,
        )
        collections = await orchestrator.collect(
            config.targets,
            shutdown=shutdown,
            on_collected=reconcile,
        )

    report = build_run_report(
        (collection.outcome for collection in collections.values()),
        reconciliations=reconciliations,
        persistence_errors=persistence_errors,
        elapsed=time.perf_counter() - started,
    )
    log.info(
        "Finished collection: status=%s success_rate=%.1f%% versions=%d anomalies=%s",
        report.overall_status,
        report.success_rate,
        report.total_versions,
        ", ".join(report.anomalies) or "none",
    )
    return report
