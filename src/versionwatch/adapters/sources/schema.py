"""Pydantic models describing upstream version payloads."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, RootModel


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GitHubTag(UpstreamModel):
    name: str


class GitHubTagList(RootModel[list[GitHubTag]]):
    pass


class GitHubRelease(UpstreamModel):
    tag_name: str
    published_at: datetime | None = None
    draft: bool = False
    prerelease: bool = False


class GitHubReleaseList(RootModel[list[GitHubRelease]]):
    pass


class DockerHubTag(UpstreamModel):
    name: str
    last_updated: datetime | None = None


class DockerHubTagsPage(UpstreamModel):
    results: list[DockerHubTag]
    next: str | None = None


class NodeRelease(UpstreamModel):
    version: str
    release_date: date = Field(alias="date")
    # codename string for LTS lines, ``false`` otherwise
    lts: str | bool = False

    @property
    def is_lts(self) -> bool:
        return isinstance(self.lts, str)


class NodeReleaseList(RootModel[list[NodeRelease]]):
    pass


class NodeScheduleEntry(UpstreamModel):
    start: date | None = None
    end: date | None = None


class NodeSchedule(RootModel[dict[str, NodeScheduleEntry]]):
    pass
