"""
Configuration model for subrepo-sync.

The CLI constructs a Config instance and passes it down into the
dispatcher together with an explicit target list, so behavior can be
adjusted (and tested) without relying on global state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from .domain import Action, Subrepo
from .errors import ConfigError

DEFAULT_CONFIG_FILE = ".subrepos.json"

# Sub-repos relative to the vault root.
DEFAULT_SUBREPOS: Tuple[Subrepo, ...] = (
    Subrepo(".obsidian", "https://github.com/casting-dot-systems/.obsidian.git"),
    Subrepo(
        "Media/Templates/Castplates",
        "https://github.com/casting-dot-systems/Castplates.git",
    ),
)


def default_message(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M")
    return f"chore: subrepo sync ({stamp})"


@dataclass(frozen=True)
class Config:
    """
    Options for a single subrepo-sync run.
    """

    action: Action
    message: str = ""
    dry_run: bool = False
    verbosity: int = 0
    only: Tuple[str, ...] = ()
    config_path: str = DEFAULT_CONFIG_FILE

    @property
    def verbose(self) -> bool:
        return self.verbosity >= 1


def load_subrepos(config_path: str) -> List[Subrepo]:
    """
    Load and validate sub-repos from a JSON configuration file.

    Supported formats:
      - {"subrepos": [...]} object
      - [...] top-level list
    where each entry is a path string or an object with "path" and an
    optional "url".
    """

    path = Path(config_path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{config_path} is not valid JSON: {exc}") from exc

    if isinstance(raw, dict):
        raw_entries = raw.get("subrepos")
    else:
        raw_entries = raw

    if not isinstance(raw_entries, list):
        raise ConfigError(
            f"{config_path} must be a JSON list or an object with a 'subrepos' list"
        )

    subrepos: List[Subrepo] = []
    for i, item in enumerate(raw_entries, start=1):
        if isinstance(item, str):
            item = {"path": item}
        if not isinstance(item, dict):
            raise ConfigError(f"sub-repo #{i} must be a path string or an object")

        sub_path = item.get("path")
        if not isinstance(sub_path, str) or not sub_path.strip():
            raise ConfigError(f"sub-repo #{i} requires non-empty string field 'path'")

        url = item.get("url")
        if url is not None and (not isinstance(url, str) or not url.strip()):
            raise ConfigError(f"sub-repo #{i} field 'url' must be a non-empty string when provided")

        subrepos.append(Subrepo(path=sub_path.strip(), url=url.strip() if url else None))

    return subrepos


def configured_subrepos(config_path: str) -> List[Subrepo]:
    """
    Return the sub-repos from ``config_path``, or the defaults if the
    file does not exist.
    """

    if Path(config_path).is_file():
        return load_subrepos(config_path)
    return list(DEFAULT_SUBREPOS)


def resolve_targets(config: Config) -> List[str]:
    """
    Return the ordered list of directories to process.

    ``--only`` paths replace the configured list entirely.
    """

    if config.only:
        return list(config.only)
    return [subrepo.path for subrepo in configured_subrepos(config.config_path)]
