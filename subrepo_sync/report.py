"""
User-facing progress output for subrepo-sync.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .domain import Outcome, RunReport

INDENT = "    "


class Reporter:
    """
    Writes per-directory progress lines to a text stream.
    """

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out or sys.stdout

    def _write(self, line: str) -> None:
        self.out.write(line + "\n")
        self.out.flush()

    def header(self, action: str, target: str) -> None:
        self._write(f"==> {action.upper()} {target}")

    def missing(self, target: str) -> None:
        self._write(f"==> Skipping {target} (missing directory)")

    def notice(self, message: str) -> None:
        self._write(INDENT + message)


def print_run_summary(report: RunReport, out: Optional[TextIO] = None) -> None:
    """
    Print a concise summary of a run: outcome tallies, then failures.
    """

    stream = out or sys.stdout
    counts = report.counts()
    lines = []
    if counts:
        tally = ", ".join(
            f"{counts[outcome]} {outcome.value}" for outcome in Outcome if outcome in counts
        )
        lines.append(f"Summary: {tally}")
    for failure in report.failed:
        lines.append(f"Failed: {failure.target}: {failure.detail}")
    lines.append("All done (dry run)." if report.dry_run else "All done.")
    stream.write("\n".join(lines) + "\n")
