"""Shared plumbing for HTTP-backed version sources."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from versionwatch.adapters.http_resilience import ResilientClient, build_limiter
from versionwatch.domain.ports import EmptyResponseError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aiolimiter import AsyncLimiter

    from versionwatch.config.http_resilience import ResilienceConfig
    from versionwatch.domain.model import RawVersionRecord

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class SharedLimitClientFactory:
    """Client factory handing every client of one upstream the same rate limiter.

    Limiters are keyed by ``ResilienceConfig.name``, so all GitHub-backed sources of
    a run share one budget of GitHub calls.
    """

    limiters: dict[str, AsyncLimiter | None] = field(default_factory=dict)

    def __call__(self, config: ResilienceConfig) -> ResilientClient:
        if config.name not in self.limiters:
            self.limiters[config.name] = build_limiter(config)
        return ResilientClient(config, limiter=self.limiters[config.name])


def require_records(source: str, records: Sequence[RawVersionRecord]) -> list[RawVersionRecord]:
    if not records:
        raise EmptyResponseError(f"{source}: no matching versions", source=source)
    return list(records)
