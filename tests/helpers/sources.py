"""Scripted sources and chain builders for collection tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

from versionwatch.domain.collection import SourceChain
from versionwatch.domain.model import ProductInfo, RawVersionRecord

if TYPE_CHECKING:
    from collections.abc import Sequence


def records(*names: str) -> list[RawVersionRecord]:
    return [RawVersionRecord(raw_name=name) for name in names]


def dated(
    name: str,
    released: str,
    *,
    eol: str | None = None,
    lts: bool | None = None,
) -> RawVersionRecord:
    return RawVersionRecord(
        raw_name=name,
        release_date=date.fromisoformat(released),
        eol_date=date.fromisoformat(eol) if eol else None,
        lts=lts,
    )


@dataclass
class StubSource:
    """Source returning ``result`` (or raising it) after an optional delay."""

    name: str
    result: Sequence[RawVersionRecord] | BaseException = field(default_factory=list)
    delay: float = 0.0
    calls: int = 0

    async def attempt(self) -> Sequence[RawVersionRecord]:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@dataclass
class ConcurrencyProbe:
    """Tracks how many probed sources are inside ``attempt`` at once."""

    current: int = 0
    peak: int = 0

    def source(
        self, name: str, result: Sequence[RawVersionRecord], *, delay: float
    ) -> ProbedSource:
        return ProbedSource(name=name, result=result, delay=delay, probe=self)


@dataclass
class ProbedSource:
    name: str
    result: Sequence[RawVersionRecord]
    delay: float
    probe: ConcurrencyProbe

    async def attempt(self) -> Sequence[RawVersionRecord]:
        self.probe.current += 1
        self.probe.peak = max(self.probe.peak, self.probe.current)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.probe.current -= 1
        return self.result


def make_chain(
    product: str,
    *sources: object,
    static: Sequence[RawVersionRecord] = (),
) -> SourceChain:
    return SourceChain(
        product=ProductInfo(name=product, display_name=product.title()),
        sources=list(sources),  # type: ignore[arg-type]
        static_versions=tuple(static),
    )
