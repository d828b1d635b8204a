"""
Custom exception types used across subrepo-sync.

Defining explicit error classes makes it easier for the CLI and higher
layers to distinguish between user-facing failures and unexpected bugs.
"""

from __future__ import annotations


class SubrepoSyncError(Exception):
    """Base class for all subrepo-sync specific errors."""


class GitError(SubrepoSyncError):
    """Raised when git cannot be run or a required git command fails."""


class ConfigError(SubrepoSyncError):
    """Raised when the sub-repo configuration file is invalid."""


class BootstrapError(SubrepoSyncError):
    """Raised when the sub-repos cannot be set up safely."""
