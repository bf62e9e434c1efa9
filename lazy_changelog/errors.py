"""Exceptions raised by lazy-changelog.

Everything derives from ChangelogError so callers driving several packages
can catch a single type per package and keep going.
"""

from __future__ import annotations


class ChangelogError(Exception):
    """Base class for all lazy-changelog errors."""


class GitCommandError(ChangelogError):
    """A git subprocess exited with a non-zero status."""

    def __init__(self, args: tuple[str, ...], returncode: int, stderr: str) -> None:
        self.args_ = args
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"git {' '.join(args)} failed ({returncode}){detail}")


class CommitLookupError(ChangelogError):
    """A commit hash could not be resolved."""

    def __init__(self, commit_hash: str, reason: str = "not found") -> None:
        self.commit_hash = commit_hash
        super().__init__(f"Failed to parse commit {commit_hash}: {reason}")


class InvalidVersionError(ChangelogError):
    """A version string is not a usable major.minor.patch version."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"Invalid version: {version!r}")


class VersionDriftError(ChangelogError):
    """The version on disk disagrees with the tag history."""


class StateError(ChangelogError):
    """An orchestrator method was called before set_range()."""


class PackageNotFoundError(ChangelogError):
    """A package name does not match any workspace member."""
