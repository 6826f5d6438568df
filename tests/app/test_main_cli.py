from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from versionwatch import main as main_module
from versionwatch.domain.collection import CollectionOutcome, RunReport, build_run_report
from versionwatch.domain.model import OutcomeStatus
from versionwatch.domain.ports import PersistenceError
from versionwatch.domain.reconciliation import ReconciliationResult

if TYPE_CHECKING:
    from pathlib import Path

    from versionwatch.config import CollectionConfig

TARGETS = """
[[targets]]
name = "demo"

[[targets]]
name = "ghost"

[[targets]]
name = "node"
enabled = false
"""


@pytest.fixture
def targets_file(tmp_path: Path) -> Path:
    path = tmp_path / "targets.toml"
    path.write_text(TARGETS)
    return path


def _report(*, persistence_error: str | None = None) -> RunReport:
    errors = {"demo": persistence_error} if persistence_error else None
    reconciliations = (
        None
        if persistence_error
        else {"demo": ReconciliationResult(product="demo", cycles_inserted=1)}
    )
    return build_run_report(
        [
            CollectionOutcome(
                product="demo",
                status=OutcomeStatus.SUCCEEDED,
                tier_index=0,
                source_name="stub",
                cycle_count=1,
            ),
            CollectionOutcome(product="ghost", status=OutcomeStatus.FAILED_NO_DATA),
        ],
        reconciliations=reconciliations,
        persistence_errors=errors,
    )


def test_collect_passes_enabled_config_and_exits_ok(
    monkeypatch: pytest.MonkeyPatch,
    targets_file: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_collect(config: CollectionConfig, **kwargs: object) -> RunReport:
        captured["config"] = config
        captured.update(kwargs)
        return _report()

    monkeypatch.setattr(main_module, "collect_release_history", fake_collect)

    code = main_module.main(["collect", "--targets", str(targets_file)])

    config = captured["config"]
    assert code == main_module.EXIT_OK
    enabled = config.enabled_targets  # type: ignore[attr-defined]
    assert [target.name for target in enabled] == ["demo", "ghost"]
    assert captured["shutdown"] is not None
    output = capsys.readouterr().out
    assert "ghost" in output
    assert "failed_no_data" in output
    assert "+1 new" in output


def test_collect_only_restricts_targets(
    monkeypatch: pytest.MonkeyPatch, targets_file: Path
) -> None:
    captured: list[CollectionConfig] = []

    def fake_collect(config: CollectionConfig, **_kwargs: object) -> RunReport:
        captured.append(config)
        return _report()

    monkeypatch.setattr(main_module, "collect_release_history", fake_collect)

    main_module.main(["collect", "--targets", str(targets_file), "--only", "ghost"])

    assert [target.name for target in captured[0].targets] == ["ghost"]


def test_collect_json_output(
    monkeypatch: pytest.MonkeyPatch,
    targets_file: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(main_module, "collect_release_history", lambda *_a, **_k: _report())

    code = main_module.main(["collect", "--targets", str(targets_file), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert code == main_module.EXIT_OK
    assert [entry["status"] for entry in payload["products"]] == ["succeeded", "failed_no_data"]


def test_unreachable_persistence_exits_with_failure(
    monkeypatch: pytest.MonkeyPatch, targets_file: Path
) -> None:
    monkeypatch.setattr(
        main_module,
        "collect_release_history",
        lambda *_a, **_k: _report(persistence_error="disk I/O error"),
    )

    assert main_module.main(["collect", "--targets", str(targets_file)]) == main_module.EXIT_FAILURE


def test_startup_persistence_error_exits_with_failure(
    monkeypatch: pytest.MonkeyPatch, targets_file: Path
) -> None:
    def failing_collect(*_args: object, **_kwargs: object) -> RunReport:
        raise PersistenceError("Database unavailable")

    monkeypatch.setattr(main_module, "collect_release_history", failing_collect)

    assert main_module.main(["collect", "--targets", str(targets_file)]) == main_module.EXIT_FAILURE


def test_configuration_errors_exit_with_usage_code(tmp_path: Path) -> None:
    code = main_module.main(["collect", "--targets", str(tmp_path / "missing.toml")])

    assert code == main_module.EXIT_USAGE


def test_unknown_only_target_is_a_usage_error(targets_file: Path) -> None:
    code = main_module.main(["collect", "--targets", str(targets_file), "--only", "php"])

    assert code == main_module.EXIT_USAGE


def test_targets_command_lists_configuration(
    targets_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main_module.main(["targets", "--targets", str(targets_file)])

    lines = capsys.readouterr().out.splitlines()
    assert code == main_module.EXIT_OK
    assert lines[0].split() == ["demo", "enabled", "(no", "collector)"]
    assert lines[2].split() == ["node", "disabled"]


def test_missing_command_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main([])

    assert excinfo.value.code == 2
