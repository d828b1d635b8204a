"""
Command-line interface for subrepo-sync.

This module is responsible for argument parsing and delegating to the
dispatcher.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import DEFAULT_CONFIG_FILE, Config, default_message
from .dispatcher import run_sync
from .domain import Action
from .errors import ConfigError
from .logging_utils import configure_logging

EPILOG = """\
examples:
  subrepo-sync save -m "wip: tweaks"
  subrepo-sync update
  subrepo-sync save --only .obsidian -m "update workspace"
  subrepo-sync update --only "Media/Templates/Castplates"
"""


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subrepo-sync",
        description=(
            "save:   git add -A && git commit -m <msg> && git push\n"
            "update: git reset --hard && git pull --ff-only\n"
            "Applied to each configured sub-repo in order."
        ),
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "action",
        choices=[action.value for action in Action],
        help="What to do with each sub-repo.",
    )
    parser.add_argument(
        "-m",
        "--message",
        default=None,
        help="Commit message for 'save' (default: chore: subrepo sync <timestamp>).",
    )
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="PATH",
        help="Run on only this sub-repo (can be passed multiple times).",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Show commands without executing them.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Echo commands as they run; repeat for debug logging.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        metavar="PATH",
        help=f"Sub-repo list written by subrepo-bootstrap (default: {DEFAULT_CONFIG_FILE}).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    config = Config(
        action=Action(args.action),
        message=args.message if args.message is not None else default_message(),
        dry_run=args.dry_run,
        verbosity=args.verbose,
        only=tuple(args.only),
        config_path=args.config,
    )

    configure_logging(verbosity=config.verbosity)

    try:
        report = run_sync(config)
    except KeyboardInterrupt:
        # Whatever already ran on a target stands.
        return 130
    except ConfigError as exc:
        print(f"subrepo-sync: error: {exc}", file=sys.stderr)
        return 1

    return report.exit_status


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
