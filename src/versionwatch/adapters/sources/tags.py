"""Selection of version-like tags from repositories and registries."""

from __future__ import annotations

import re
from dataclasses import dataclass

from versionwatch.domain.versioning import normalize

_DEFAULT_PATTERN = r"^v?(?P<version>\d+\.\d+\.\d+)$"


@dataclass(frozen=True, slots=True)
class TagFilter:
    """Extract a version from a tag name and keep it only when it qualifies.

    ``pattern`` must define a ``version`` group. Two-part versions are padded to
    three parts when ``pad_patch`` is set. ``min_version`` compares against the
    release tuple of the extracted version.
    """

    pattern: str = _DEFAULT_PATTERN
    min_version: tuple[int, ...] = ()
    pad_patch: bool = False
    separator_aliases: str = ""

    def extract(self, tag: str) -> str | None:
        match = re.search(self.pattern, tag.strip())
        if match is None:
            return None
        version = match["version"]
        for alias in self.separator_aliases:
            version = version.replace(alias, ".")
        if self.pad_patch and version.count(".") == 1:
            version = f"{version}.0"
        if self.min_version:
            key = normalize(version).ordering_key
            if key is None or key.release < self.min_version:
                return None
        return version
