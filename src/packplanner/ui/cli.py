# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from packplanner.adapters.draft import DraftError
from packplanner.adapters.installed import InstalledStateError
from packplanner.adapters.manifest import ManifestError
from packplanner.adapters.report import (
    encode_graph_summary,
    encode_hierarchy,
    encode_report,
    encode_update_paths,
)
from packplanner.app import check_updates, describe_catalog, plan_installation
from packplanner.common import configure_logging
from packplanner.config import ConfigurationError, get_planner_config, get_source_config
from packplanner.domain.errors import PlanningError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Preview content pack installations")
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Manifest file (YAML or JSON); defaults to $PACKPLANNER_CATALOG",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("graph", help="Show the pack graph and hierarchy")

    plan = subparsers.add_parser("plan", help="Compute an installation plan")
    plan.add_argument(
        "packs",
        nargs="+",
        help="Pack ids to install",
    )
    plan.add_argument(
        "--installed",
        type=Path,
        help="Installed-state export (JSON); defaults to $PACKPLANNER_INSTALLED",
    )
    plan.add_argument(
        "--draft",
        type=Path,
        help="Plan draft with prefix and per-page choices (JSON)",
    )

    updates = subparsers.add_parser("updates", help="List installed packs with new versions")
    updates.add_argument(
        "--installed",
        type=Path,
        help="Installed-state export (JSON); defaults to $PACKPLANNER_INSTALLED",
    )

    return parser.parse_args(list(argv))


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _run(args: argparse.Namespace) -> dict[str, Any]:
    config = get_planner_config()
    sources = get_source_config(
        catalog_path=args.catalog,
        installed_path=getattr(args, "installed", None),
    )

    if args.command == "graph":
        graph, hierarchy = describe_catalog(sources.catalog_path)
        return {
            "graph_summary": encode_graph_summary(graph),
            "hierarchy_tree": encode_hierarchy(hierarchy),
        }
    if args.command == "plan":
        report = plan_installation(
            sources.catalog_path,
            args.packs,
            installed_path=sources.installed_path,
            draft_path=args.draft,
            config=config,
        )
        return encode_report(report)
    if sources.installed_path is None:
        raise ConfigurationError("updates needs --installed or $PACKPLANNER_INSTALLED")
    return encode_update_paths(check_updates(sources.catalog_path, sources.installed_path))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        configure_logging(level=get_planner_config().log_level)
        payload = _run(parsed_args)
    except (ConfigurationError, ManifestError, InstalledStateError, DraftError) as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except PlanningError as exc:
        log.error("Planning failed: %s", exc)  # noqa: TRY400
        sys.exit(1)

    _emit(payload)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
