"""Tracked targets and collection settings loaded from a TOML file."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final, cast

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError, InvalidTargetsFileError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_TARGETS_FILE: Final[Path] = Path("config") / "targets.toml"
DEFAULT_MAX_IN_FLIGHT: Final[int] = 4
DEFAULT_PIPELINE_TIMEOUT_SECONDS: Final[float] = 60.0


@dataclass(frozen=True, slots=True)
class TargetConfig:
    """One tracked product as listed in the targets file."""

    name: str
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class CollectionConfig:
    targets: tuple[TargetConfig, ...] = field(default_factory=tuple)
    max_in_flight: int = DEFAULT_MAX_IN_FLIGHT
    pipeline_timeout_seconds: float | None = DEFAULT_PIPELINE_TIMEOUT_SECONDS

    @property
    def enabled_targets(self) -> tuple[TargetConfig, ...]:
        return tuple(target for target in self.targets if target.enabled)

    def only(self, names: Iterable[str]) -> CollectionConfig:
        """Return a copy restricted to ``names``; unknown names raise."""

        wanted = set(names)
        known = {target.name for target in self.targets}
        unknown = wanted - known
        if unknown:
            raise ConfigurationError(f"Unknown targets: {', '.join(sorted(unknown))}")
        return CollectionConfig(
            targets=tuple(target for target in self.targets if target.name in wanted),
            max_in_flight=self.max_in_flight,
            pipeline_timeout_seconds=self.pipeline_timeout_seconds,
        )


def parse_targets(document: Mapping[str, object]) -> CollectionConfig:
    """Build a :class:`CollectionConfig` from a decoded TOML document."""

    raw_targets = document.get("targets", [])
    if not isinstance(raw_targets, list):
        raise InvalidTargetsFileError("'targets' must be an array of tables")

    targets: list[TargetConfig] = []
    seen: set[str] = set()
    for index, entry in enumerate(cast(list[object], raw_targets)):
        if not isinstance(entry, dict):
            raise InvalidTargetsFileError(f"targets[{index}] must be a table")
        table = cast(dict[str, object], entry)
        name = table.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InvalidTargetsFileError(f"targets[{index}].name must be a non-empty string")
        enabled = table.get("enabled", True)
        if not isinstance(enabled, bool):
            raise InvalidTargetsFileError(f"targets[{index}].enabled must be a boolean")
        normalized = name.strip()
        if normalized in seen:
            raise InvalidTargetsFileError(f"Duplicate target name: {normalized}")
        seen.add(normalized)
        targets.append(TargetConfig(name=normalized, enabled=enabled))

    raw_collection = document.get("collection", {})
    if not isinstance(raw_collection, dict):
        raise InvalidTargetsFileError("'collection' must be a table")
    collection = cast(dict[str, object], raw_collection)

    max_in_flight = collection.get("max_in_flight", DEFAULT_MAX_IN_FLIGHT)
    if not isinstance(max_in_flight, int) or isinstance(max_in_flight, bool) or max_in_flight < 1:
        raise InvalidTargetsFileError("collection.max_in_flight must be a positive integer")

    timeout = collection.get("pipeline_timeout_seconds", DEFAULT_PIPELINE_TIMEOUT_SECONDS)
    if not isinstance(timeout, int | float) or isinstance(timeout, bool):
        raise InvalidTargetsFileError("collection.pipeline_timeout_seconds must be a number")

    return CollectionConfig(
        targets=tuple(targets),
        max_in_flight=max_in_flight,
        pipeline_timeout_seconds=float(timeout) if timeout > 0 else None,
    )


def load_collection_config(path: Path | None = None) -> CollectionConfig:
    """Load the targets file and apply environment overrides."""

    env_path = optional_env_var("VERSIONWATCH_TARGETS_FILE")
    resolved = path or (Path(env_path) if env_path else DEFAULT_TARGETS_FILE)
    try:
        with resolved.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise InvalidTargetsFileError(f"Targets file not found: {resolved}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise InvalidTargetsFileError(f"Invalid TOML in {resolved}: {exc}") from exc

    config = parse_targets(document)
    return CollectionConfig(
        targets=config.targets,
        max_in_flight=env_int("VERSIONWATCH_MAX_IN_FLIGHT", config.max_in_flight, minimum=1),
        pipeline_timeout_seconds=env_float(
            "VERSIONWATCH_PIPELINE_TIMEOUT", config.pipeline_timeout_seconds
        ),
    )
