"""Value objects describing collected versions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from versionwatch.domain.versioning.normalize import VersionKey


@dataclass(frozen=True, slots=True)
class RawVersionRecord:
    """One version as reported by a source, before normalization."""

    raw_name: str
    release_date: date | None = None
    eol_date: date | None = None
    lts: bool | None = None


@dataclass(frozen=True, slots=True)
class ProductCycle:
    """Canonical release cycle of a product.

    ``lts`` is ``None`` when the source did not say; it never overwrites a stored flag.
    """

    name: str
    ordering_key: VersionKey | None = None
    release_date: date | None = None
    eol_date: date | None = None
    lts: bool | None = None

    @property
    def known_fields(self) -> int:
        """Number of lifecycle fields carrying a concrete value."""

        return sum(value is not None for value in (self.release_date, self.eol_date, self.lts))


@dataclass(frozen=True, slots=True)
class ProductInfo:
    """Descriptive metadata configured for a tracked product."""

    name: str
    display_name: str | None = None
    homepage: str | None = None
    documentation_url: str | None = None
