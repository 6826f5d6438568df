"""Go release history page as a version source."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

from bs4 import BeautifulSoup

from versionwatch.config.http_resilience import ResilienceConfig, upstream_resilience
from versionwatch.domain.model import RawVersionRecord

from .base import ClientFactory, default_client_factory, require_records
from .errors import translate_errors

GO_RELEASE_HISTORY_URL = "https://go.dev/doc/devel/release"

_RELEASE_LINE = re.compile(
    r"go(?P<version>\d+\.\d+(?:\.\d+)?(?:rc\d+)?)\s+\(released\s+(?P<date>\d{4}-\d{2}-\d{2})\)"
)


def _go_resilience() -> ResilienceConfig:
    return upstream_resilience("golang")


@dataclass(slots=True)
class GoReleaseHistorySource:
    """Versions parsed from the release history page.

    A Go minor line is supported until the release two minors later, so a
    version's end-of-life date is the initial release date of ``major.(minor+2)``.
    Release candidates are ignored.
    """

    url: str = GO_RELEASE_HISTORY_URL
    resilience: ResilienceConfig = field(default_factory=_go_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)

    @property
    def name(self) -> str:
        return "go-release-history"

    async def attempt(self) -> list[RawVersionRecord]:
        with translate_errors(self.name):
            async with self.client_factory(self.resilience) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                html = response.text
            releases = parse_release_history(html)

        line_starts: dict[tuple[int, int], date] = {}
        for version, released in releases.items():
            parts = version.split(".")
            if len(parts) == 2 or parts[2] == "0":  # noqa: PLR2004
                line_starts[int(parts[0]), int(parts[1])] = released

        records: list[RawVersionRecord] = []
        for version, released in releases.items():
            major, minor = (int(part) for part in version.split(".")[:2])
            records.append(
                RawVersionRecord(
                    raw_name=version,
                    release_date=released,
                    eol_date=line_starts.get((major, minor + 2)),
                )
            )
        return require_records(self.name, records)


def parse_release_history(html: str) -> dict[str, date]:
    """Map every final Go version mentioned on the page to its release date, in page order."""

    text = BeautifulSoup(html, "html.parser").get_text(" ")
    releases: dict[str, date] = {}
    for match in _RELEASE_LINE.finditer(text):
        version = match["version"]
        if "rc" in version:
            continue
        releases.setdefault(version, date.fromisoformat(match["date"]))
    return releases
