"""Node.js distribution index combined with the release schedule."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from versionwatch.config.http_resilience import ResilienceConfig, upstream_resilience
from versionwatch.domain.model import RawVersionRecord

from .base import ClientFactory, default_client_factory, require_records
from .errors import translate_errors
from .schema import NodeReleaseList, NodeSchedule, NodeScheduleEntry

if TYPE_CHECKING:
    from datetime import date

NODE_INDEX_URL = "https://nodejs.org/dist/index.json"
NODE_SCHEDULE_URL = "https://raw.githubusercontent.com/nodejs/release/main/schedule.json"


def _node_resilience() -> ResilienceConfig:
    return upstream_resilience("nodejs")


@dataclass(slots=True)
class NodeDistributionSource:
    """Every published Node.js version with its date, LTS flag and end-of-life date.

    The schedule is keyed by release line (``v20``, or ``v0.12`` for the 0.x era).
    """

    index_url: str = NODE_INDEX_URL
    schedule_url: str = NODE_SCHEDULE_URL
    resilience: ResilienceConfig = field(default_factory=_node_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)

    @property
    def name(self) -> str:
        return "nodejs-dist"

    async def attempt(self) -> list[RawVersionRecord]:
        with translate_errors(self.name):
            async with self.client_factory(self.resilience) as client:
                index_response = await client.get(self.index_url)
                index_response.raise_for_status()
                releases = NodeReleaseList.model_validate(index_response.json()).root

                schedule_response = await client.get(self.schedule_url)
                schedule_response.raise_for_status()
                schedule = NodeSchedule.model_validate(schedule_response.json()).root

        records = [
            RawVersionRecord(
                raw_name=release.version,
                release_date=release.release_date,
                eol_date=_end_of_life(release.version, schedule),
                lts=release.is_lts,
            )
            for release in releases
        ]
        return require_records(self.name, records)


def _end_of_life(version: str, schedule: dict[str, NodeScheduleEntry]) -> date | None:
    parts = version.lstrip("vV").split(".")
    candidates = [f"v{parts[0]}"]
    if len(parts) > 1:
        candidates.insert(0, f"v{parts[0]}.{parts[1]}")
    for key in candidates:
        entry = schedule.get(key)
        if entry is not None and entry.end is not None:
            return entry.end
    return None
