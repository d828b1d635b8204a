"""
Core domain models for subrepo-sync.

These types describe configured sub-repos and the outcome of syncing
each of them. They avoid any direct git dependency so the dispatcher
and the reporter can share them.
"""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional


class Action(str, enum.Enum):
    SAVE = "save"
    UPDATE = "update"


class Outcome(str, enum.Enum):
    """
    Result of applying an action to one target directory.

    SKIPPED_NO_REMOTE is never emitted by the dispatcher: a missing
    origin only skips the push or pull step and the target succeeds.
    """

    SKIPPED_MISSING = "skipped-missing"
    SKIPPED_NOT_A_REPO = "skipped-not-a-repo"
    SKIPPED_DETACHED_HEAD = "skipped-detached-head"
    SKIPPED_NO_REMOTE = "skipped-no-remote"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_failure(self) -> bool:
        return self is Outcome.FAILED


@dataclass(frozen=True)
class Subrepo:
    """
    A configured sub-repo. ``url`` is only needed to clone it.
    """

    path: str
    url: Optional[str] = None


@dataclass(frozen=True)
class DirectoryOutcome:
    target: str
    outcome: Outcome
    detail: str = ""


@dataclass
class RunReport:
    """
    Outcomes of one invocation, in processing order.
    """

    action: Action
    dry_run: bool = False
    outcomes: List[DirectoryOutcome] = field(default_factory=list)

    def add(self, outcome: DirectoryOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def failed(self) -> List[DirectoryOutcome]:
        return [o for o in self.outcomes if o.outcome.is_failure]

    @property
    def exit_status(self) -> int:
        return 1 if self.failed else 0

    def counts(self) -> Dict[Outcome, int]:
        return dict(Counter(o.outcome for o in self.outcomes))
