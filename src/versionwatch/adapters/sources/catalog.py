"""Tracked products, their ranked sources and curated fallback versions.

Source order is precedence: the first source returning usable versions wins
and later ones are not consulted. GitHub is preferred where it carries the
authoritative history; Docker Hub backs it up when GitHub rate-limits
unauthenticated clients.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from versionwatch.domain.collection import SourceChain
from versionwatch.domain.model import ProductInfo, RawVersionRecord

from .base import ClientFactory, SharedLimitClientFactory
from .dockerhub import DockerHubTagsSource
from .github import GitHubReleasesSource, GitHubTagsSource
from .golang import GoReleaseHistorySource
from .node import NodeDistributionSource
from .postgresql import PostgresVersioningSource
from .tags import TagFilter

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from versionwatch.config.github import GitHubConfig
    from versionwatch.domain.ports import VersionSource

type SourceBuilder = Callable[[GitHubConfig, ClientFactory], list[VersionSource]]

_PLAIN_SEMVER = TagFilter(r"^v?(?P<version>\d+\.\d+\.\d+)$")


@dataclass(frozen=True, slots=True)
class ProductDefinition:
    info: ProductInfo
    build_sources: SourceBuilder
    static_versions: tuple[RawVersionRecord, ...] = field(default_factory=tuple)


def _static(*names: str, lts: frozenset[str] = frozenset()) -> tuple[RawVersionRecord, ...]:
    return tuple(
        RawVersionRecord(raw_name=name, lts=True if name in lts else None) for name in names
    )


def _node_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    return [
        NodeDistributionSource(client_factory=client_factory),
        GitHubReleasesSource("nodejs/node", github, client_factory=client_factory),
    ]


def _go_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    return [
        GoReleaseHistorySource(client_factory=client_factory),
        GitHubTagsSource(
            "golang/go",
            github,
            TagFilter(r"^go(?P<version>\d+\.\d+(?:\.\d+)?)$"),
            client_factory=client_factory,
        ),
    ]


def _python_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    return [
        GitHubTagsSource("python/cpython", github, _PLAIN_SEMVER, client_factory=client_factory),
        DockerHubTagsSource("library/python", _PLAIN_SEMVER, client_factory=client_factory),
    ]


def _rust_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    return [
        GitHubReleasesSource("rust-lang/rust", github, client_factory=client_factory),
        DockerHubTagsSource("library/rust", _PLAIN_SEMVER, client_factory=client_factory),
    ]


def _kong_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    kong_filter = TagFilter(r"^(?P<version>\d+\.\d+\.\d+)(?:-.*)?$", min_version=(2,))
    return [
        GitHubTagsSource("Kong/kong", github, kong_filter, client_factory=client_factory),
        DockerHubTagsSource("library/kong", kong_filter, client_factory=client_factory),
    ]


def _mysql_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    # Matches "mysql-8.0.42", "mysql-cluster-8.4.5" and image tags like "8.0.42-oracle".
    mysql_filter = TagFilter(
        r"^(?:mysql(?:-cluster)?-)?(?P<version>\d+\.\d+\.\d+)(?:-.*)?$", min_version=(5, 6)
    )
    return [
        GitHubTagsSource(
            "mysql/mysql-server", github, mysql_filter, client_factory=client_factory
        ),
        DockerHubTagsSource("library/mysql", mysql_filter, client_factory=client_factory),
    ]


def _swift_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    # Release tags look like "swift-5.9-RELEASE"; image tags like "5.9" or "5.10.1-jammy".
    swift_filter = TagFilter(
        r"^(?:swift-)?(?P<version>\d+\.\d+(?:\.\d+)?)(?:-RELEASE)?(?:-[a-z][a-z0-9]*)?$",
        min_version=(5,),
        pad_patch=True,
    )
    return [
        GitHubTagsSource("swiftlang/swift", github, swift_filter, client_factory=client_factory),
        DockerHubTagsSource("library/swift", swift_filter, client_factory=client_factory),
    ]


def _postgresql_sources(
    github: GitHubConfig, client_factory: ClientFactory
) -> list[VersionSource]:
    return [
        PostgresVersioningSource(client_factory=client_factory),
        GitHubTagsSource(
            "postgres/postgres",
            github,
            TagFilter(r"^REL_?(?P<version>\d+_\d+)$", separator_aliases="_"),
            client_factory=client_factory,
        ),
    ]


def _nginx_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    return [
        GitHubTagsSource(
            "nginx/nginx",
            github,
            TagFilter(r"^release-(?P<version>\d+\.\d+\.\d+)$"),
            client_factory=client_factory,
        ),
        DockerHubTagsSource("library/nginx", _PLAIN_SEMVER, client_factory=client_factory),
    ]


def _caddy_sources(github: GitHubConfig, client_factory: ClientFactory) -> list[VersionSource]:
    return [
        GitHubReleasesSource("caddyserver/caddy", github, client_factory=client_factory),
        DockerHubTagsSource("library/caddy", _PLAIN_SEMVER, client_factory=client_factory),
    ]


PRODUCTS: tuple[ProductDefinition, ...] = (
    ProductDefinition(
        info=ProductInfo(
            name="node",
            display_name="Node.js",
            homepage="https://nodejs.org",
            documentation_url="https://nodejs.org/docs/latest/api/",
        ),
        build_sources=_node_sources,
        static_versions=_static(
            "22.11.0", "20.18.0", "18.20.4", lts=frozenset({"22.11.0", "20.18.0", "18.20.4"})
        ),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="go",
            display_name="Go",
            homepage="https://go.dev",
            documentation_url="https://go.dev/doc/",
        ),
        build_sources=_go_sources,
        static_versions=_static("1.23.0", "1.22.0", "1.21.0"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="python",
            display_name="Python",
            homepage="https://www.python.org",
            documentation_url="https://docs.python.org/3/",
        ),
        build_sources=_python_sources,
        static_versions=_static("3.13.0", "3.12.7", "3.11.10", "3.10.15", "3.9.20"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="rust",
            display_name="Rust",
            homepage="https://www.rust-lang.org",
            documentation_url="https://doc.rust-lang.org",
        ),
        build_sources=_rust_sources,
        static_versions=_static("1.82.0", "1.81.0", "1.80.1", "1.80.0"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="kong",
            display_name="Kong Gateway",
            homepage="https://konghq.com",
            documentation_url="https://docs.konghq.com",
        ),
        build_sources=_kong_sources,
        static_versions=_static("3.8.0", "3.7.1", "3.6.1", "3.5.0", "3.4.2", "2.8.5"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="mysql",
            display_name="MySQL",
            homepage="https://www.mysql.com",
            documentation_url="https://dev.mysql.com/doc/",
        ),
        build_sources=_mysql_sources,
        static_versions=_static("9.1.0", "8.4.3", "8.0.40", "5.7.44"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="swift",
            display_name="Swift",
            homepage="https://www.swift.org",
            documentation_url="https://www.swift.org/documentation/",
        ),
        build_sources=_swift_sources,
        static_versions=_static(
            "6.0.3", "6.0.2", "6.0.1", "6.0.0", "5.10.1", "5.10.0", "5.9.2", "5.9.1", "5.9.0",
            "5.8.1", "5.8.0", "5.7.3", "5.7.2", "5.7.1", "5.7.0", "5.6.3", "5.6.2", "5.6.1",
            "5.6.0", "5.5.3", "5.5.2", "5.5.1", "5.5.0", "5.4.3", "5.4.2", "5.4.1", "5.4.0",
            "5.3.3", "5.3.2", "5.3.1", "5.3.0",
        ),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="postgresql",
            display_name="PostgreSQL",
            homepage="https://www.postgresql.org",
            documentation_url="https://www.postgresql.org/docs/",
        ),
        build_sources=_postgresql_sources,
        static_versions=_static("17", "16", "15", "14", "13"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="nginx",
            display_name="nginx",
            homepage="https://nginx.org",
            documentation_url="https://nginx.org/en/docs/",
        ),
        build_sources=_nginx_sources,
        static_versions=_static("1.27.2", "1.26.2", "1.24.0"),
    ),
    ProductDefinition(
        info=ProductInfo(
            name="caddy",
            display_name="Caddy",
            homepage="https://caddyserver.com",
            documentation_url="https://caddyserver.com/docs/",
        ),
        build_sources=_caddy_sources,
        static_versions=_static("2.8.4", "2.7.6", "2.6.4"),
    ),
)


def product_definitions() -> dict[str, ProductDefinition]:
    return {definition.info.name: definition for definition in PRODUCTS}


def build_source_chains(
    github: GitHubConfig,
    *,
    client_factory: ClientFactory | None = None,
    definitions: Mapping[str, ProductDefinition] | None = None,
) -> dict[str, SourceChain]:
    """One chain per known product, with GitHub credentials injected into its sources.

    Unless ``client_factory`` is given, sources hitting the same upstream share one
    rate limiter.
    """

    if client_factory is None:
        client_factory = SharedLimitClientFactory()
    definitions = definitions if definitions is not None else product_definitions()
    return {
        name: SourceChain(
            product=definition.info,
            sources=definition.build_sources(github, client_factory),
            static_versions=definition.static_versions,
        )
        for name, definition in definitions.items()
    }
