"""
One-time setup for subrepo-sync.

Clones each configured sub-repo into its location (when it is not
already a working copy) and writes the sub-repo list that subrepo-sync
reads on every run.
"""

from __future__ import annotations

import argparse
import json
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .config import DEFAULT_CONFIG_FILE, configured_subrepos
from .domain import Subrepo
from .errors import BootstrapError, ConfigError, GitError
from .git_adapter import clone


def ensure_git_available() -> None:
    if shutil.which("git") is None:
        raise BootstrapError("git not found in PATH")


def clone_if_needed(url: str, dest: str, out: Optional[TextIO] = None) -> bool:
    """
    Clone url into dest unless dest is already a git working copy.

    Returns True when a clone was performed. A dest that exists but is
    not a working copy is left alone and reported as an error.
    """

    stream = out or sys.stdout
    path = Path(dest)
    if (path / ".git").exists():
        stream.write(f"Already a git repo: {dest}  -> skip\n")
        return False
    if path.exists():
        raise BootstrapError(
            f"exists but not a git repo: {dest}. "
            "Delete/move it, or turn it into a git repo, then rerun."
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    stream.write(f"Cloning {url} -> {dest}\n")
    clone(url, dest)
    return True


def write_config(
    config_path: str,
    subrepos: Sequence[Subrepo],
    force: bool = False,
    now: Optional[datetime] = None,
    out: Optional[TextIO] = None,
) -> bool:
    """
    Write the sub-repo list as JSON.

    An existing file is kept unless force is set, in which case it is
    first copied to ``<config_path>.bak.<timestamp>``. Returns True if
    the file was written.
    """

    stream = out or sys.stdout
    path = Path(config_path)
    if path.exists():
        if not force:
            stream.write(
                f"{config_path} already exists. Use --force to overwrite "
                "(a backup will be created).\n"
            )
            return False
        stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
        backup = path.with_name(f"{path.name}.bak.{stamp}")
        shutil.copy2(path, backup)
        stream.write(f"Backed up existing {config_path} -> {backup}\n")

    entries = []
    for subrepo in subrepos:
        entry = {"path": subrepo.path}
        if subrepo.url:
            entry["url"] = subrepo.url
        entries.append(entry)

    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"subrepos": entries}, indent=2) + "\n", encoding="utf-8")
    stream.write(f"Wrote {config_path}\n")
    return True


def bootstrap(config_path: str, force: bool = False, out: Optional[TextIO] = None) -> None:
    stream = out or sys.stdout
    ensure_git_available()

    subrepos = configured_subrepos(config_path)
    for subrepo in subrepos:
        if not subrepo.url:
            stream.write(f"No clone URL for {subrepo.path}  -> skip\n")
            continue
        clone_if_needed(subrepo.url, subrepo.path, out=stream)

    write_config(config_path, subrepos, force=force, out=stream)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subrepo-bootstrap",
        description="Clone the configured sub-repos and write the subrepo-sync config.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file (a timestamped backup is kept).",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        metavar="PATH",
        help=f"Config file to write (default: {DEFAULT_CONFIG_FILE}).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        bootstrap(args.config, force=args.force)
    except (BootstrapError, ConfigError, GitError) as exc:
        print(f"subrepo-bootstrap: error: {exc}", file=sys.stderr)
        return 1

    print("Setup complete.")
    print("Next: subrepo-sync save -m 'initial sync'  or  subrepo-sync update")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
