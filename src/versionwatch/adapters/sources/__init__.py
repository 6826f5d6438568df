"""HTTP-backed version sources and the catalog of tracked products."""

from __future__ import annotations

from .base import ClientFactory, SharedLimitClientFactory, default_client_factory
from .catalog import PRODUCTS, ProductDefinition, build_source_chains, product_definitions
from .dockerhub import DockerHubTagsSource
from .errors import is_rate_limited, translate_errors
from .github import GitHubReleasesSource, GitHubTagsSource
from .golang import GoReleaseHistorySource, parse_release_history
from .node import NodeDistributionSource
from .postgresql import PostgresVersioningSource, parse_versioning_table
from .tags import TagFilter

__all__ = [
    "PRODUCTS",
    "ClientFactory",
    "DockerHubTagsSource",
    "GitHubReleasesSource",
    "GitHubTagsSource",
    "GoReleaseHistorySource",
    "NodeDistributionSource",
    "PostgresVersioningSource",
    "ProductDefinition",
    "SharedLimitClientFactory",
    "TagFilter",
    "build_source_chains",
    "default_client_factory",
    "is_rate_limited",
    "parse_release_history",
    "parse_versioning_table",
    "product_definitions",
    "translate_errors",
]
