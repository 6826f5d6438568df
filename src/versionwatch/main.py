#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from versionwatch.adapters.sources import product_definitions
from versionwatch.app import collect_release_history
from versionwatch.config import ConfigurationError, configure_logging, load_collection_config
from versionwatch.domain.ports import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from versionwatch.config import CollectionConfig
    from versionwatch.domain.collection import RunReport

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--targets",
        type=Path,
        help="Path to the targets TOML file (defaults to config/targets.toml)",
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser = argparse.ArgumentParser(
        description="Collect and persist the release history of tracked products"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect = subparsers.add_parser(
        "collect", parents=[common], help="Collect versions for all enabled targets"
    )
    collect.add_argument(
        "--only",
        nargs="+",
        metavar="NAME",
        help="Restrict the run to these target names",
    )
    collect.add_argument(
        "--json",
        action="store_true",
        help="Print the run report as JSON",
    )

    subparsers.add_parser("targets", parents=[common], help="List configured targets")

    return parser.parse_args(list(argv))


def _load_config(args: argparse.Namespace) -> CollectionConfig:
    config = load_collection_config(args.targets)
    only = getattr(args, "only", None)
    if only:
        config = config.only(only)
    return config


def _print_targets(config: CollectionConfig) -> None:
    known = product_definitions()
    for target in config.targets:
        state = "enabled" if target.enabled else "disabled"
        note = "" if target.name in known else "  (no collector)"
        print(f"{target.name:<16} {state}{note}")


def _print_report(report: RunReport) -> None:
    for product in report.products:
        outcome = product.outcome
        line = (
            f"{outcome.product:<16} {outcome.status:<15} {outcome.cycle_count:>5} versions"
            f"  via {outcome.source_name or '-'}"
        )
        if product.reconciliation is not None:
            result = product.reconciliation
            line += f"  (+{result.cycles_inserted} new, {result.cycles_updated} updated)"
        if product.persistence_error is not None:
            line += f"  [persistence error: {product.persistence_error}]"
        elif outcome.error is not None:
            line += f"  [{outcome.error}]"
        print(line)
    print(
        f"\n{report.overall_status}: {report.success_rate:.1f}% success, "
        f"{report.total_versions} versions, "
        f"anomalies: {', '.join(report.anomalies) or 'none'}"
    )


class _ShutdownHandler:
    """First Ctrl+C stops launching new products; a second one aborts."""

    def __init__(self, event: asyncio.Event) -> None:
        self.event = event

    def __call__(self, _signal_received: int, _frame: FrameType | None) -> None:
        if self.event.is_set():
            raise KeyboardInterrupt
        print("\nShutdown requested, finishing in-flight products (Ctrl+C again to abort)")
        self.event.set()


def main(argv: Sequence[str] | None = None) -> int:
    """Main application entry point; returns the process exit code."""

    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        config = _load_config(parsed_args)
    except ConfigurationError:
        log.exception("Configuration error")
        return EXIT_USAGE

    if parsed_args.command == "targets":
        _print_targets(config)
        return EXIT_OK

    shutdown = asyncio.Event()
    previous_handler = signal(SIGINT, _ShutdownHandler(shutdown))
    try:
        report = collect_release_history(config, shutdown=shutdown)
    except PersistenceError:
        log.exception("Persistence layer unavailable")
        return EXIT_FAILURE
    finally:
        signal(SIGINT, previous_handler)

    if parsed_args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)

    if report.persistence_unreachable:
        log.error("Every reconciliation failed; persistence layer unreachable")
        return EXIT_FAILURE
    return EXIT_OK


def run() -> None:
    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    run()
