"""Version identifier normalization.

Raw version tokens arrive in every shape upstream sources can think of
(``v20.11.1``, ``5.9``, ``1.2rc1``, ``nightly``). ``normalize`` maps each of them
to a canonical name, which is the deduplication and upsert key, plus an optional
ordering key.

Resolution order:

1. strict semantic version (``MAJOR.MINOR.PATCH[-PRERELEASE]``)
2. loose numeric version understood by :mod:`packaging` (two-part releases are
   padded to three parts, PEP 440 pre-releases rendered as semver prereleases)
3. anything else is kept verbatim (trimmed) without an ordering key

Canonical names re-normalize to themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from packaging.version import InvalidVersion, Version

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from versionwatch.domain.model import ProductCycle

_IDENTIFIER = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_STRICT_SEMVER = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<prerelease>{_IDENTIFIER}(?:\.{_IDENTIFIER})*))?$",
    re.ASCII,
)

type PrereleaseIdentifier = tuple[int, int, str]


@dataclass(frozen=True, slots=True, order=True)
class VersionKey:
    """Comparable rank of a version.

    A final release sorts after all of its prereleases; numeric prerelease
    identifiers sort before alphanumeric ones (semver precedence rules).
    """

    release: tuple[int, ...]
    is_final: bool
    prerelease: tuple[PrereleaseIdentifier, ...] = ()


class NormalizedVersion(NamedTuple):
    name: str
    ordering_key: VersionKey | None


def normalize(raw: str) -> NormalizedVersion:
    """Return the canonical name and ordering key for ``raw``."""

    token = raw.strip()
    strict = _parse_strict(token)
    if strict is not None:
        return strict
    if token[:1] in {"v", "V"}:
        strict = _parse_strict(token[1:])
        if strict is not None:
            return strict
    loose = _parse_loose(token)
    if loose is not None:
        return loose
    return NormalizedVersion(token, None)


def sort_cycles(cycles: Iterable[ProductCycle]) -> list[ProductCycle]:
    """Order cycles by rank; unranked cycles follow all ranked ones, by name."""

    ranked: list[tuple[VersionKey, ProductCycle]] = []
    unranked: list[ProductCycle] = []
    for cycle in cycles:
        if cycle.ordering_key is None:
            unranked.append(cycle)
        else:
            ranked.append((cycle.ordering_key, cycle))
    ranked.sort(key=lambda item: item[0])
    unranked.sort(key=lambda cycle: cycle.name)
    return [cycle for _, cycle in ranked] + unranked


def _parse_strict(token: str) -> NormalizedVersion | None:
    match = _STRICT_SEMVER.match(token)
    if match is None:
        return None
    release = (int(match["major"]), int(match["minor"]), int(match["patch"]))
    prerelease = match["prerelease"]
    identifiers = prerelease.split(".") if prerelease else []
    return NormalizedVersion(token, _build_key(release, identifiers))


def _parse_loose(token: str) -> NormalizedVersion | None:
    try:
        version = Version(token)
    except InvalidVersion:
        return None
    if version.epoch or version.post is not None or version.dev is not None or version.local:
        return None

    release = version.release
    if len(release) == 2:  # noqa: PLR2004
        release = (*release, 0)
    name = ".".join(str(part) for part in release)
    identifiers: list[str] = []
    if version.pre is not None:
        letter, number = version.pre
        identifiers = [letter, str(number)]
        name = f"{name}-{letter}.{number}"
    return NormalizedVersion(name, _build_key(release, identifiers))


def _build_key(release: tuple[int, ...], identifiers: Sequence[str]) -> VersionKey:
    return VersionKey(
        release=release,
        is_final=not identifiers,
        prerelease=tuple(_rank_identifier(identifier) for identifier in identifiers),
    )


def _rank_identifier(identifier: str) -> PrereleaseIdentifier:
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)
