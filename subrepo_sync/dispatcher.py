"""
Save/update orchestration for subrepo-sync.

The dispatcher visits each target directory once, in declared order,
and runs the state machine for the requested action against it. A
failure on one target is recorded and never stops the others.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence, TextIO

from .config import Config, resolve_targets
from .domain import Action, DirectoryOutcome, Outcome, RunReport
from .errors import GitError
from .git_adapter import GitClient, SubprocessGit
from .report import Reporter, print_run_summary

LOG = logging.getLogger(__name__)


class SyncDispatcher:
    def __init__(self, git: GitClient, reporter: Optional[Reporter] = None) -> None:
        self.git = git
        self.reporter = reporter or Reporter()

    def run(self, action: Action, targets: Sequence[str], config: Config) -> RunReport:
        """
        Apply action to every target and return the collected outcomes.
        """

        action = Action(action)
        report = RunReport(action=action, dry_run=config.dry_run)
        for target in targets:
            outcome = self._process(action, target, config)
            LOG.info("%s %s: %s", action.value, target, outcome.outcome.value)
            report.add(outcome)
        return report

    def _process(self, action: Action, target: str, config: Config) -> DirectoryOutcome:
        if not os.path.isdir(target):
            self.reporter.missing(target)
            return DirectoryOutcome(target, Outcome.SKIPPED_MISSING, "missing directory")

        self.reporter.header(action.value, target)
        try:
            if not self.git.is_repo(target):
                return self._notice(target, Outcome.SKIPPED_NOT_A_REPO, "Skipped: not a git repo.")
            if action is Action.SAVE:
                return self.save(target, config.message)
            return self.update(target)
        except GitError as exc:
            return self._notice(target, Outcome.FAILED, str(exc))

    def _notice(self, target: str, outcome: Outcome, message: str) -> DirectoryOutcome:
        self.reporter.notice(message)
        return DirectoryOutcome(target, outcome, message)

    def save(self, target: str, message: str) -> DirectoryOutcome:
        """
        Stage everything, commit (best effort) and push.
        """

        added = self.git.add_all(target)
        if not added.ok:
            return self._notice(target, Outcome.FAILED, f"git add failed: {added.detail}")

        committed = self.git.commit(target, message)
        if not committed.ok:
            LOG.info("commit in %s did not succeed: %s", target, committed.detail)
            self.reporter.notice("Nothing to commit.")

        if not self.git.has_origin(target):
            return self._notice(
                target,
                Outcome.SUCCEEDED,
                "No 'origin' remote configured; skipping push.",
            )

        if self.git.has_upstream(target):
            pushed = self.git.push(target)
        else:
            branch = self.git.current_branch(target)
            if branch is None:
                return self._notice(
                    target,
                    Outcome.SUCCEEDED,
                    "No branch or detached HEAD; cannot push. "
                    f'(Try: git -C "{target}" checkout -b main)',
                )
            pushed = self.git.push_set_upstream(target, branch)

        if not pushed.ok:
            return self._notice(target, Outcome.FAILED, f"git push failed: {pushed.detail}")
        return DirectoryOutcome(target, Outcome.SUCCEEDED, "saved")

    def update(self, target: str) -> DirectoryOutcome:
        """
        Discard local changes and fast-forward from origin.
        """

        if self.git.current_branch(target) is None:
            return self._notice(
                target,
                Outcome.SKIPPED_DETACHED_HEAD,
                f"Detached HEAD in {target}. Please checkout a branch "
                f"(e.g., 'git -C \"{target}\" checkout main'). Skipping.",
            )

        # Fetch stays ahead of the reset even though the reset does not
        # depend on it.
        fetched = self.git.fetch_all(target)
        if not fetched.ok:
            return self._notice(target, Outcome.FAILED, f"git fetch failed: {fetched.detail}")

        reset = self.git.reset_hard(target)
        if not reset.ok:
            return self._notice(target, Outcome.FAILED, f"git reset failed: {reset.detail}")

        if not self.git.has_origin(target):
            return self._notice(
                target,
                Outcome.SUCCEEDED,
                "No 'origin' remote configured; skipping pull.",
            )

        pulled = self.git.pull_ff_only(target)
        if not pulled.ok:
            LOG.debug("pull in %s failed: %s", target, pulled.detail)
            return self._notice(
                target,
                Outcome.FAILED,
                "Fast-forward only pull failed. "
                "You may need to rebase or check remote branch.",
            )
        return DirectoryOutcome(target, Outcome.SUCCEEDED, "updated")


def run_sync(config: Config, out: Optional[TextIO] = None) -> RunReport:
    """
    Entry point for the main CLI command.

    Resolves the targets for config, runs the dispatcher with a
    subprocess-backed git client and prints the run summary.
    """

    LOG.debug("Starting subrepo-sync with config: %s", config)

    targets = resolve_targets(config)
    git = SubprocessGit(dry_run=config.dry_run, verbose=config.verbose, out=out)
    dispatcher = SyncDispatcher(git, Reporter(out))
    report = dispatcher.run(config.action, targets, config)
    print_run_summary(report, out)
    return report
