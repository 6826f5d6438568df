"""GitHub tags and releases as version sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from versionwatch.domain.model import RawVersionRecord

from .base import ClientFactory, default_client_factory, require_records
from .errors import translate_errors
from .schema import GitHubRelease, GitHubReleaseList, GitHubTag, GitHubTagList
from .tags import TagFilter

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from versionwatch.adapters.http_resilience import ResilientClient
    from versionwatch.config.github import GitHubConfig

log = getLogger(__name__)

MAX_PAGES = 10
PER_PAGE = 100


@dataclass(slots=True)
class GitHubTagsSource:
    """Versions from ``GET /repos/{repository}/tags``; tags carry no dates."""

    repository: str
    config: GitHubConfig
    tag_filter: TagFilter = field(default_factory=TagFilter)
    max_pages: int = MAX_PAGES
    client_factory: ClientFactory = field(default=default_client_factory)

    @property
    def name(self) -> str:
        return f"github-tags:{self.repository}"

    async def attempt(self) -> list[RawVersionRecord]:
        tags: list[GitHubTag] = []
        with translate_errors(self.name):
            async with self.client_factory(self.config.resilience) as client:
                async for payload in _pages(
                    client, f"/repos/{self.repository}/tags", self.max_pages, self.name
                ):
                    tags.extend(GitHubTagList.model_validate(payload).root)

        records = [
            RawVersionRecord(raw_name=version)
            for tag in tags
            if (version := self.tag_filter.extract(tag.name)) is not None
        ]
        return require_records(self.name, records)


@dataclass(slots=True)
class GitHubReleasesSource:
    """Versions from ``GET /repos/{repository}/releases`` with their publish dates.

    Drafts are always skipped; prereleases unless ``include_prereleases`` is set.
    """

    repository: str
    config: GitHubConfig
    tag_filter: TagFilter = field(default_factory=TagFilter)
    include_prereleases: bool = False
    max_pages: int = MAX_PAGES
    client_factory: ClientFactory = field(default=default_client_factory)

    @property
    def name(self) -> str:
        return f"github-releases:{self.repository}"

    async def attempt(self) -> list[RawVersionRecord]:
        releases: list[GitHubRelease] = []
        with translate_errors(self.name):
            async with self.client_factory(self.config.resilience) as client:
                async for payload in _pages(
                    client, f"/repos/{self.repository}/releases", self.max_pages, self.name
                ):
                    releases.extend(GitHubReleaseList.model_validate(payload).root)

        records: list[RawVersionRecord] = []
        for release in releases:
            if release.draft or (release.prerelease and not self.include_prereleases):
                continue
            version = self.tag_filter.extract(release.tag_name)
            if version is None:
                continue
            published = release.published_at.date() if release.published_at else None
            records.append(RawVersionRecord(raw_name=version, release_date=published))
        return require_records(self.name, records)


async def _pages(
    client: ResilientClient, path: str, max_pages: int, source: str
) -> AsyncIterator[object]:
    for page in range(1, max_pages + 1):
        response = await client.get(path, params={"page": page, "per_page": PER_PAGE})
        response.raise_for_status()
        payload = response.json()
        if not payload:
            return
        yield payload
        if isinstance(payload, list) and len(payload) < PER_PAGE:
            return
    log.warning("%s: stopped after %d pages, results may be incomplete", source, max_pages)
