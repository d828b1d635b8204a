"""
Git integration for subrepo-sync.

The dispatcher talks to git only through the narrow GitClient
interface defined here: one method per logical operation, each run
against a single target directory. SubprocessGit implements it on top
of the git CLI and owns dry-run and command echo behavior.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .errors import GitError

LOG = logging.getLogger(__name__)


@dataclass
class GitResult:
    """
    Result of one logical git operation against a directory.
    """

    ok: bool
    stdout: str = ""
    stderr: str = ""

    @property
    def detail(self) -> str:
        return (self.stderr or "").strip() or (self.stdout or "").strip()


def _run_git(
    args: List[str],
    cwd: Optional[str] = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command and return the completed process.

    All git invocations go through this helper so that error handling
    and logging are centralized. With check=False a non-zero exit is
    returned to the caller instead of raising.
    """

    cmd = ["git", *args]
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            text=True,
            encoding="utf-8",
            errors="replace",
            capture_output=True,
        )
    except OSError as exc:
        raise GitError(f"failed to execute git: {exc}") from exc

    if completed.returncode != 0:
        LOG.debug("git stderr: %s", completed.stderr)
        if check:
            detail = (completed.stderr or "").strip()
            raise GitError(f"git command failed: {' '.join(cmd)}: {detail}")

    return completed


class GitClient(ABC):
    """
    Abstract interface for the git operations the dispatcher needs.

    Queries never mutate a working copy. Mutations return a GitResult
    instead of raising when git reports a failure, because most
    failures here (nothing to commit, rejected pull) are expected
    states the dispatcher branches on.
    """

    @abstractmethod
    def is_repo(self, directory: str) -> bool:
        """Return True if directory is a git working copy."""

    @abstractmethod
    def current_branch(self, directory: str) -> Optional[str]:
        """Return the checked out branch, or None when HEAD is detached."""

    @abstractmethod
    def has_origin(self, directory: str) -> bool:
        """Return True if a remote named origin is configured."""

    @abstractmethod
    def has_upstream(self, directory: str) -> bool:
        """Return True if the current branch tracks an upstream."""

    @abstractmethod
    def add_all(self, directory: str) -> GitResult:
        """Stage every change, deletions included."""

    @abstractmethod
    def commit(self, directory: str, message: str) -> GitResult:
        """Commit the staged changes."""

    @abstractmethod
    def push(self, directory: str) -> GitResult:
        """Push to the existing upstream."""

    @abstractmethod
    def push_set_upstream(self, directory: str, branch: str) -> GitResult:
        """Push branch to origin and record it as the upstream."""

    @abstractmethod
    def fetch_all(self, directory: str) -> GitResult:
        """Fetch every remote, pruning stale remote-tracking refs."""

    @abstractmethod
    def reset_hard(self, directory: str) -> GitResult:
        """Discard local modifications in the working copy."""

    @abstractmethod
    def pull_ff_only(self, directory: str) -> GitResult:
        """Pull, refusing anything but a fast-forward."""


class SubprocessGit(GitClient):
    """
    GitClient backed by ``git -C <directory> ...`` subprocesses.

    When verbose or dry_run is set, every mutating command is echoed
    to ``out`` as ``+ git -C <dir> ...``. In dry-run mode mutating
    commands are not executed and report success.
    """

    def __init__(
        self,
        dry_run: bool = False,
        verbose: bool = False,
        out: Optional[TextIO] = None,
    ) -> None:
        self.dry_run = dry_run
        self.verbose = verbose
        self.out = out or sys.stdout

    def _query(self, directory: str, args: List[str]) -> subprocess.CompletedProcess[str]:
        return _run_git(["-C", directory, *args], check=False)

    def _mutate(self, directory: str, args: List[str]) -> GitResult:
        full_args = ["-C", directory, *args]
        if self.verbose or self.dry_run:
            self.out.write("+ " + shlex.join(["git", *full_args]) + "\n")
            self.out.flush()
        if self.dry_run:
            return GitResult(ok=True)

        completed = _run_git(full_args, check=False)
        return GitResult(
            ok=completed.returncode == 0,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def is_repo(self, directory: str) -> bool:
        if os.path.exists(os.path.join(directory, ".git")):
            return True
        return self._query(directory, ["rev-parse", "--is-inside-work-tree"]).returncode == 0

    def current_branch(self, directory: str) -> Optional[str]:
        completed = self._query(directory, ["rev-parse", "--abbrev-ref", "HEAD"])
        branch = (completed.stdout or "").strip()
        if completed.returncode != 0 or not branch or branch == "HEAD":
            return None
        return branch

    def has_origin(self, directory: str) -> bool:
        return self._query(directory, ["remote", "get-url", "origin"]).returncode == 0

    def has_upstream(self, directory: str) -> bool:
        completed = self._query(
            directory, ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"]
        )
        return completed.returncode == 0

    def add_all(self, directory: str) -> GitResult:
        return self._mutate(directory, ["add", "-A"])

    def commit(self, directory: str, message: str) -> GitResult:
        return self._mutate(directory, ["commit", "-m", message])

    def push(self, directory: str) -> GitResult:
        return self._mutate(directory, ["push"])

    def push_set_upstream(self, directory: str, branch: str) -> GitResult:
        return self._mutate(directory, ["push", "-u", "origin", branch])

    def fetch_all(self, directory: str) -> GitResult:
        return self._mutate(directory, ["fetch", "--all", "--prune"])

    def reset_hard(self, directory: str) -> GitResult:
        return self._mutate(directory, ["reset", "--hard"])

    def pull_ff_only(self, directory: str) -> GitResult:
        return self._mutate(directory, ["pull", "--ff-only"])


def clone(url: str, dest: str) -> None:
    """
    Clone url into dest. Raises GitError if the clone fails.
    """

    _run_git(["clone", url, dest])
