"""Port for upstream version sources.

Each tracked product is served by one or more sources ranked in a chain. A
source performs one attempt per run and either returns raw version records or
raises a :class:`SourceError` describing why it could not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from versionwatch.domain.model import SourceErrorKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from versionwatch.domain.model import RawVersionRecord


class SourceError(RuntimeError):
    """Base class for failures of a single source attempt."""

    kind: ClassVar[SourceErrorKind] = SourceErrorKind.UNEXPECTED

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class TransportError(SourceError):
    """Network or HTTP failure talking to the upstream."""

    kind = SourceErrorKind.TRANSPORT


class RateLimitedError(SourceError):
    """Upstream asked us to back off; skip to the next source without retrying."""

    kind = SourceErrorKind.RATE_LIMITED


class ParseFailureError(SourceError):
    """Upstream payload was malformed."""

    kind = SourceErrorKind.PARSE_FAILURE


class EmptyResponseError(SourceError):
    """Upstream responded but yielded nothing usable."""

    kind = SourceErrorKind.EMPTY


@runtime_checkable
class VersionSource(Protocol):
    """One ranked source of version records for a product."""

    @property
    def name(self) -> str: ...

    async def attempt(self) -> Sequence[RawVersionRecord]: ...
