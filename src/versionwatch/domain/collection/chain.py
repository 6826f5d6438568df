"""Ranked-fallback fetch protocol for a single product.

A chain tries its dynamic sources in order, one attempt each, and stops at the
first one that yields usable cycles. When every dynamic source failed, or the
pipeline timeout elapsed, it degrades to the curated static versions. The chain
itself never fails: the worst case is an empty static tier.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from versionwatch.domain.model import ProductCycle, SourceErrorKind
from versionwatch.domain.ports import SourceError
from versionwatch.domain.versioning import deduplicate, normalize

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from versionwatch.domain.model import ProductInfo, RawVersionRecord
    from versionwatch.domain.ports import VersionSource

log = getLogger(__name__)

STATIC_SOURCE_NAME = "static"


class ChainState(StrEnum):
    NOT_STARTED = "not_started"
    TRYING_SOURCE = "trying_source"
    SUCCEEDED = "succeeded"
    EXHAUSTED_TO_STATIC = "exhausted_to_static"


@dataclass(frozen=True, slots=True)
class SourceAttempt:
    """Record of one source invocation within a run."""

    source: str
    error_kind: SourceErrorKind | None
    detail: str | None
    elapsed: float
    record_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None


@dataclass(frozen=True, slots=True)
class ChainResult:
    state: ChainState
    cycles: tuple[ProductCycle, ...]
    tier_index: int | None
    source_name: str
    attempts: tuple[SourceAttempt, ...] = ()

    @property
    def used_static(self) -> bool:
        return self.state is ChainState.EXHAUSTED_TO_STATIC


@dataclass(slots=True)
class SourceChain:
    """Per-product state machine walking ranked sources down to the static tier."""

    product: ProductInfo
    sources: Sequence[VersionSource]
    static_versions: Sequence[RawVersionRecord] = ()
    _state: ChainState = field(default=ChainState.NOT_STARTED, init=False)
    _current_index: int | None = field(default=None, init=False)

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def current_index(self) -> int | None:
        """Index of the source being tried (or that succeeded); ``None`` otherwise."""

        return self._current_index

    async def run(self, *, timeout: float | None = None) -> ChainResult:
        """Walk the chain once and return the cycles of the first non-empty tier."""

        self._state = ChainState.NOT_STARTED
        self._current_index = None
        attempts: list[SourceAttempt] = []
        started: float | None = None

        try:
            async with asyncio.timeout(timeout):
                for index, source in enumerate(self.sources):
                    self._enter(index, source)
                    started = time.perf_counter()
                    cycles = await self._attempt(source, attempts, started)
                    started = None
                    if cycles:
                        self._state = ChainState.SUCCEEDED
                        log.info(
                            "%s: source %r succeeded with %d cycles",
                            self.product.name,
                            source.name,
                            len(cycles),
                        )
                        return ChainResult(
                            state=ChainState.SUCCEEDED,
                            cycles=tuple(cycles),
                            tier_index=index,
                            source_name=source.name,
                            attempts=tuple(attempts),
                        )
        except TimeoutError:
            if self._current_index is not None and started is not None:
                source = self.sources[self._current_index]
                attempts.append(
                    SourceAttempt(
                        source=source.name,
                        error_kind=SourceErrorKind.TIMEOUT,
                        detail=f"pipeline timeout of {timeout}s elapsed",
                        elapsed=time.perf_counter() - started,
                    )
                )
            log.warning(
                "%s: pipeline timeout of %ss elapsed, degrading to static versions",
                self.product.name,
                timeout,
            )

        return self._exhaust(attempts)

    def _enter(self, index: int, source: VersionSource) -> None:
        self._state = ChainState.TRYING_SOURCE
        self._current_index = index
        log.debug("%s: trying source %d (%s)", self.product.name, index, source.name)

    async def _attempt(
        self,
        source: VersionSource,
        attempts: list[SourceAttempt],
        started: float,
    ) -> list[ProductCycle]:
        try:
            records = await source.attempt()
        except SourceError as exc:
            attempts.append(self._failure(source, exc.kind, str(exc), started))
            return []
        except Exception as exc:
            log.exception("%s: source %r raised unexpectedly", self.product.name, source.name)
            attempts.append(self._failure(source, SourceErrorKind.UNEXPECTED, repr(exc), started))
            return []

        cycles = deduplicate(canonical_cycles(records))
        if not cycles:
            attempts.append(
                self._failure(source, SourceErrorKind.EMPTY, "no usable versions", started)
            )
            return []
        attempts.append(
            SourceAttempt(
                source=source.name,
                error_kind=None,
                detail=None,
                elapsed=time.perf_counter() - started,
                record_count=len(cycles),
            )
        )
        return cycles

    def _failure(
        self,
        source: VersionSource,
        kind: SourceErrorKind,
        detail: str,
        started: float,
    ) -> SourceAttempt:
        log.warning(
            "%s: source %r failed (%s): %s", self.product.name, source.name, kind, detail
        )
        return SourceAttempt(
            source=source.name,
            error_kind=kind,
            detail=detail,
            elapsed=time.perf_counter() - started,
        )

    def _exhaust(self, attempts: list[SourceAttempt]) -> ChainResult:
        self._state = ChainState.EXHAUSTED_TO_STATIC
        self._current_index = None
        cycles = canonical_cycles(self.static_versions)
        if cycles:
            log.info(
                "%s: using %d static versions", self.product.name, len(cycles)
            )
        else:
            log.warning("%s: no source produced data and no static versions", self.product.name)
        return ChainResult(
            state=ChainState.EXHAUSTED_TO_STATIC,
            cycles=tuple(cycles),
            tier_index=None,
            source_name=STATIC_SOURCE_NAME,
            attempts=tuple(attempts),
        )


def canonical_cycles(records: Iterable[RawVersionRecord]) -> list[ProductCycle]:
    """Normalize raw records, dropping those without a usable name. Order is kept."""

    cycles: list[ProductCycle] = []
    for record in records:
        name, ordering_key = normalize(record.raw_name)
        if not name:
            continue
        cycles.append(
            ProductCycle(
                name=name,
                ordering_key=ordering_key,
                release_date=record.release_date,
                eol_date=record.eol_date,
                lts=record.lts,
            )
        )
    return cycles
