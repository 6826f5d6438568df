from __future__ import annotations

from pathlib import Path

from versionwatch.adapters.sources import (
    DockerHubTagsSource,
    GitHubTagsSource,
    NodeDistributionSource,
    SharedLimitClientFactory,
    build_source_chains,
    product_definitions,
)
from versionwatch.config import get_github_config, load_collection_config
from versionwatch.domain.collection import ChainState
from versionwatch.domain.ports import VersionSource

TARGETS_FILE = Path(__file__).resolve().parents[3] / "config" / "targets.toml"


def test_every_product_gets_a_chain_with_sources_and_static_versions() -> None:
    chains = build_source_chains(get_github_config())

    assert set(chains) == {
        "node", "go", "python", "rust", "kong", "mysql", "swift", "postgresql", "nginx", "caddy",
    }
    for name, chain in chains.items():
        assert chain.product.name == name
        assert chain.sources, name
        assert chain.static_versions, name
        assert chain.state is ChainState.NOT_STARTED
        assert all(isinstance(source, VersionSource) for source in chain.sources)


def test_source_order_is_precedence() -> None:
    chains = build_source_chains(get_github_config())

    assert isinstance(chains["node"].sources[0], NodeDistributionSource)
    python = chains["python"].sources
    assert isinstance(python[0], GitHubTagsSource)
    assert isinstance(python[1], DockerHubTagsSource)


def test_github_token_is_injected_into_github_sources() -> None:
    chains = build_source_chains(get_github_config(token="secret"))

    source = chains["python"].sources[0]
    assert isinstance(source, GitHubTagsSource)
    assert source.config.token == "secret"


def test_definitions_can_be_restricted() -> None:
    definitions = product_definitions()

    chains = build_source_chains(
        get_github_config(), definitions={"go": definitions["go"]}
    )

    assert list(chains) == ["go"]


def test_shipped_targets_file_matches_catalog() -> None:
    config = load_collection_config(TARGETS_FILE)

    assert {target.name for target in config.targets} == set(product_definitions())


def test_sources_of_one_upstream_share_a_rate_limiter() -> None:
    chains = build_source_chains(get_github_config())
    python_tags, python_docker = chains["python"].sources
    go_tags = next(s for s in chains["go"].sources if isinstance(s, GitHubTagsSource))
    assert isinstance(python_tags, GitHubTagsSource)
    assert isinstance(python_docker, DockerHubTagsSource)

    factory = python_tags.client_factory
    assert isinstance(factory, SharedLimitClientFactory)
    assert go_tags.client_factory is factory
    assert python_docker.client_factory is factory

    github_client = factory(python_tags.config.resilience)
    other_github_client = factory(go_tags.config.resilience)
    docker_client = factory(python_docker.resilience)

    assert github_client.limiter is not None
    assert other_github_client.limiter is github_client.limiter
    assert docker_client.limiter is not None
    assert docker_client.limiter is not github_client.limiter


def test_separate_builds_do_not_share_limiters() -> None:
    first = build_source_chains(get_github_config())["python"].sources[0]
    second = build_source_chains(get_github_config())["python"].sources[0]
    assert isinstance(first, GitHubTagsSource)
    assert isinstance(second, GitHubTagsSource)

    assert first.client_factory is not second.client_factory
