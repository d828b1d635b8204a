"""
Logging helpers for subrepo-sync.

Diagnostics (git invocations, captured stderr) go through logging;
per-directory progress meant for the user is written by the reporter.
"""

from __future__ import annotations

import logging


def level_for_verbosity(verbosity: int) -> int:
    """
    Map a ``-v`` count to a logging level.

    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """

    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int) -> None:
    """
    Configure the root logger based on a verbosity count.

    Logs go to stderr so they never interleave with the report on stdout.
    """

    logging.basicConfig(
        level=level_for_verbosity(verbosity),
        format="%(levelname)s %(name)s: %(message)s",
    )
