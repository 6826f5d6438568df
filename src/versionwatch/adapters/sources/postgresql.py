"""PostgreSQL versioning policy page as a version source."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from bs4 import BeautifulSoup, Tag

from versionwatch.config.http_resilience import ResilienceConfig, upstream_resilience
from versionwatch.domain.model import RawVersionRecord

from .base import ClientFactory, default_client_factory, require_records
from .errors import translate_errors

POSTGRESQL_VERSIONING_URL = "https://www.postgresql.org/support/versioning/"
_MIN_CELLS = 5


def _postgresql_resilience() -> ResilienceConfig:
    return upstream_resilience("postgresql")


@dataclass(slots=True)
class PostgresVersioningSource:
    """Major versions with first and final release dates from the support table.

    Columns: version, current minor, supported, first release, final release.
    """

    url: str = POSTGRESQL_VERSIONING_URL
    resilience: ResilienceConfig = field(default_factory=_postgresql_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)

    @property
    def name(self) -> str:
        return "postgresql-versioning"

    async def attempt(self) -> list[RawVersionRecord]:
        with translate_errors(self.name):
            async with self.client_factory(self.resilience) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                html = response.text
        return require_records(self.name, parse_versioning_table(html))


def parse_versioning_table(html: str) -> list[RawVersionRecord]:
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if not isinstance(table, Tag):
        return []
    records: list[RawVersionRecord] = []
    for row in table.select("tbody tr"):
        cells = [cell.get_text(strip=True) for cell in row.find_all("td")]
        if len(cells) < _MIN_CELLS or not cells[0]:
            continue
        records.append(
            RawVersionRecord(
                raw_name=cells[0],
                release_date=_parse_date(cells[3]),
                eol_date=_parse_date(cells[4]),
            )
        )
    return records


def _parse_date(text: str) -> date | None:
    try:
        return datetime.strptime(text, "%B %d, %Y").date()  # noqa: DTZ007
    except ValueError:
        return None
