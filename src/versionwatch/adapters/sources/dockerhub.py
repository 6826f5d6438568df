"""Docker Hub image tags as a version source."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger

from versionwatch.config.http_resilience import ResilienceConfig, upstream_resilience
from versionwatch.domain.model import RawVersionRecord

from .base import ClientFactory, default_client_factory, require_records
from .errors import translate_errors
from .schema import DockerHubTag, DockerHubTagsPage
from .tags import TagFilter

log = getLogger(__name__)

DOCKER_HUB_URL = "https://hub.docker.com"
PAGE_SIZE = 100
MAX_PAGES = 5


def _docker_hub_resilience() -> ResilienceConfig:
    return upstream_resilience("dockerhub", base_url=DOCKER_HUB_URL)


@dataclass(slots=True)
class DockerHubTagsSource:
    """Versions from the tags of a Docker Hub repository (``library/<image>``)."""

    repository: str
    tag_filter: TagFilter = field(default_factory=TagFilter)
    max_pages: int = MAX_PAGES
    resilience: ResilienceConfig = field(default_factory=_docker_hub_resilience)
    client_factory: ClientFactory = field(default=default_client_factory)

    @property
    def name(self) -> str:
        return f"dockerhub:{self.repository}"

    async def attempt(self) -> list[RawVersionRecord]:
        tags: list[DockerHubTag] = []
        with translate_errors(self.name):
            async with self.client_factory(self.resilience) as client:
                url: str | None = f"/v2/repositories/{self.repository}/tags"
                params: dict[str, int] | None = {"page_size": PAGE_SIZE}
                for _ in range(self.max_pages):
                    if url is None:
                        break
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    page = DockerHubTagsPage.model_validate(response.json())
                    tags.extend(page.results)
                    # ``next`` is an absolute URL that already carries the query
                    url, params = page.next, None
                else:
                    if url is not None:
                        log.warning("%s: stopped after %d pages", self.name, self.max_pages)

        seen: set[str] = set()
        records: list[RawVersionRecord] = []
        for tag in tags:
            version = self.tag_filter.extract(tag.name)
            if version is None or version in seen:
                continue
            seen.add(version)
            records.append(RawVersionRecord(raw_name=version))
        return require_records(self.name, records)
