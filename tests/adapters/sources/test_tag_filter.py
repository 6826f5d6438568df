from __future__ import annotations

import pytest

from versionwatch.adapters.sources import TagFilter


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("v1.2.3", "1.2.3"),
        ("1.2.3", "1.2.3"),
        (" v10.0.1 ", "10.0.1"),
        ("v1.2.3-rc.1", None),
        ("1.2", None),
        ("latest", None),
    ],
)
def test_default_filter_accepts_plain_semver(tag: str, expected: str | None) -> None:
    assert TagFilter().extract(tag) == expected


def test_minimum_version_excludes_older_lines() -> None:
    mysql = TagFilter(
        r"^(?:mysql(?:-cluster)?-)?(?P<version>\d+\.\d+\.\d+)(?:-.*)?$", min_version=(5, 6)
    )

    assert mysql.extract("mysql-8.0.42") == "8.0.42"
    assert mysql.extract("mysql-cluster-8.4.5") == "8.4.5"
    assert mysql.extract("5.6.0-oracle") == "5.6.0"
    assert mysql.extract("mysql-5.5.62") is None


def test_two_part_versions_are_padded() -> None:
    swift = TagFilter(
        r"^(?:swift-)?(?P<version>\d+\.\d+(?:\.\d+)?)(?:-RELEASE)?(?:-[a-z][a-z0-9]*)?$",
        min_version=(5,),
        pad_patch=True,
    )

    assert swift.extract("swift-5.9-RELEASE") == "5.9.0"
    assert swift.extract("5.10.1-jammy") == "5.10.1"
    assert swift.extract("swift-4.2-RELEASE") is None


def test_separator_aliases_are_rewritten() -> None:
    postgres = TagFilter(r"^REL_?(?P<version>\d+_\d+)$", separator_aliases="_")

    assert postgres.extract("REL_16_4") == "16.4"
    assert postgres.extract("REL_16_BETA1") is None
