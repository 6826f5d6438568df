"""Concurrent fan-out of source chains across tracked products."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from versionwatch.domain.collection.outcome import CollectionOutcome, ProductCollection
from versionwatch.domain.model import OutcomeStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from concurrent.futures import Executor

    from versionwatch.config.targets import TargetConfig
    from versionwatch.domain.collection.chain import SourceChain
    from versionwatch.domain.model import ProductCycle, ProductInfo

log = getLogger(__name__)

type CollectedCallback = Callable[[ProductCollection], None]


@dataclass(slots=True)
class CollectionOrchestrator:
    """Run one chain per enabled target under a concurrency bound.

    A failure inside one product's pipeline (chain or ``on_collected`` callback)
    is turned into a ``FAILED`` outcome for that product only.
    ``on_collected`` runs in ``executor`` (the loop's default executor when unset),
    never on the event loop thread.
    """

    chains: Mapping[str, SourceChain]
    max_in_flight: int = 4
    pipeline_timeout: float | None = 60.0
    executor: Executor | None = None

    def __post_init__(self) -> None:
        if self.max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")

    async def collect(
        self,
        targets: Iterable[TargetConfig],
        *,
        shutdown: asyncio.Event | None = None,
        on_collected: CollectedCallback | None = None,
    ) -> dict[str, ProductCollection]:
        """Collect every enabled target with a registered chain.

        Results are keyed by product name in target order, regardless of the
        order in which pipelines finish.
        """

        selected: list[str] = []
        for target in targets:
            if not target.enabled:
                continue
            if target.name not in self.chains:
                log.warning("No source chain registered for target %r, skipping", target.name)
                continue
            if target.name in selected:
                continue
            selected.append(target.name)

        log.info(
            "Collecting %d products (max_in_flight=%d, timeout=%ss)",
            len(selected),
            self.max_in_flight,
            self.pipeline_timeout,
        )
        semaphore = asyncio.Semaphore(self.max_in_flight)
        results: dict[str, ProductCollection] = {}

        async with asyncio.TaskGroup() as group:
            for name in selected:
                group.create_task(
                    self._pipeline(
                        name,
                        semaphore=semaphore,
                        shutdown=shutdown,
                        on_collected=on_collected,
                        results=results,
                    ),
                    name=f"collect:{name}",
                )

        ordered = {name: results[name] for name in selected}
        counts: dict[OutcomeStatus, int] = {}
        for collection in ordered.values():
            status = collection.outcome.status
            counts[status] = counts.get(status, 0) + 1
        log.info(
            "Collection finished: %s",
            ", ".join(f"{status}={count}" for status, count in counts.items()) or "nothing to do",
        )
        return ordered

    async def _pipeline(
        self,
        name: str,
        *,
        semaphore: asyncio.Semaphore,
        shutdown: asyncio.Event | None,
        on_collected: CollectedCallback | None,
        results: dict[str, ProductCollection],
    ) -> None:
        chain = self.chains[name]
        async with semaphore:
            if shutdown is not None and shutdown.is_set():
                log.info("%s: shutdown requested, not started", name)
                results[name] = ProductCollection(
                    product=chain.product,
                    outcome=CollectionOutcome(product=name, status=OutcomeStatus.SKIPPED),
                )
                return

            started = time.perf_counter()
            try:
                result = await chain.run(timeout=self.pipeline_timeout)
            except Exception as exc:
                log.exception("%s: collection pipeline failed", name)
                results[name] = _failed(chain.product, exc, started)
                return

            collection = ProductCollection(
                product=chain.product,
                outcome=CollectionOutcome.from_chain(
                    name, result, elapsed=time.perf_counter() - started
                ),
                cycles=result.cycles,
            )
            results[name] = collection
            if on_collected is None:
                return
            try:
                await asyncio.get_running_loop().run_in_executor(
                    self.executor, on_collected, collection
                )
            except Exception as exc:
                log.exception("%s: post-collection step failed", name)
                results[name] = _failed(chain.product, exc, started, cycles=collection.cycles)


def _failed(
    product: ProductInfo,
    exc: Exception,
    started: float,
    *,
    cycles: tuple[ProductCycle, ...] = (),
) -> ProductCollection:
    return ProductCollection(
        product=product,
        outcome=CollectionOutcome(
            product=product.name,
            status=OutcomeStatus.FAILED,
            elapsed=time.perf_counter() - started,
            cycle_count=len(cycles),
            error=f"{type(exc).__name__}: {exc}",
        ),
        cycles=cycles,
    )
