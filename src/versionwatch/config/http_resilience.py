"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from .env import env_float

if TYPE_CHECKING:
    from collections.abc import Mapping

HTTP_CACHE_TTL_ENV = "VERSIONWATCH_HTTP_CACHE_TTL"
USER_AGENT = "versionwatch-collector"


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retry settings.

    Source clients use ``total=0``: a failing source is never retried within a run,
    the chain moves on to the next tier instead.
    """

    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """SQLite response cache; ``sqlite_path`` defaults to the data directory."""

    enabled: bool = True
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None


def http_cache_config() -> CacheConfig | None:
    """Optional on-disk response cache, enabled by a positive TTL in the environment.

    Useful while developing sources; production runs always hit the upstreams.
    """

    ttl = env_float(HTTP_CACHE_TTL_ENV, None)
    if ttl is None:
        return None
    return CacheConfig(default_ttl_seconds=ttl)


def upstream_resilience(name: str, *, base_url: str | None = None) -> ResilienceConfig:
    """Default settings for a non-GitHub upstream queried once per run."""

    return ResilienceConfig(
        name=name,
        base_url=base_url,
        timeout_seconds=20.0,
        retry=RetryPolicy(total=0),
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=http_cache_config(),
        default_headers={"User-Agent": USER_AGENT},
    )
