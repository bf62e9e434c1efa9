"""Data models for lazy-changelog.

These Pydantic models represent the core data structures passed between
the commit reader, the version decision and the changelog templates. All
of them are rebuilt from git on every run; nothing is persisted.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

BumpType = Literal["major", "minor", "patch", "none", "synced"]

PRCategory = Literal[
    "features",
    "bugfixes",
    "dependencies",
    "infrastructure",
    "documentation",
    "refactoring",
    "other",
]

UNRELEASED = "[Unreleased]"


class CommitMessage(BaseModel):
    """Structured view of a commit message.

    Attributes:
        type: Conventional-commit type ("feat", "fix", ...), or one of the
              fallbacks "merge", "deps" and "other" for free-form messages.
        scopes: Scopes from the parenthesised part of the subject.
        description: Text after "type(scope): ", or the whole subject when
                     the message is not a conventional commit.
        body_lines: Non-blank lines after the subject.
        is_breaking: Marked with "!" or a BREAKING CHANGE footer.
        is_merge: Subject starts with "Merge pull request" / "Merge branch".
        is_dependency: Dependency scope or a dependency bot signature.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    scopes: list[str] = Field(default_factory=list)
    description: str
    body_lines: list[str] = Field(default_factory=list)
    is_breaking: bool = False
    is_merge: bool = False
    is_dependency: bool = False


class CommitInfo(BaseModel):
    """Git metadata for a commit. The hash is its identity."""

    model_config = ConfigDict(frozen=True)

    hash: str
    author: str | None = None
    date: str | None = None


class ParsedCommit(BaseModel):
    """A commit message plus its git metadata and, for merges, its PR."""

    model_config = ConfigDict(frozen=True)

    message: CommitMessage
    info: CommitInfo | None = None
    pr: PRInfo | None = None

    @property
    def hash(self) -> str | None:
        return self.info.hash if self.info else None


class PRStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    commit_count: int


class PRInfo(BaseModel):
    """Pull request data recovered from a merge commit.

    Attributes:
        pr_number: Number extracted from the merge description (no "#").
        pr_category: Heuristic category derived from the enclosed commits.
        pr_stats: Counters about the PR.
        pr_commits: Commits the merge brought in. A squash merge yields a
                    single synthetic commit.
        pr_branch_name: Source branch without the user/fork prefix.
    """

    model_config = ConfigDict(frozen=True)

    pr_number: str
    pr_category: PRCategory
    pr_stats: PRStats
    pr_commits: list[ParsedCommit] = Field(default_factory=list)
    pr_branch_name: str = "main"


ParsedCommit.model_rebuild()


class VersionData(BaseModel):
    """Outcome of the version decision for one package.

    Attributes:
        current_version: Version of the package at its last release tag.
        bump_type: Increment chosen; "synced" means the version on disk
                   already equals the target.
        should_bump: True when the caller should write target_version.
        target_version: Version the package should be released as.
        reason: Human readable explanation, shown in CLI output.
    """

    model_config = ConfigDict(frozen=True)

    current_version: str
    bump_type: BumpType
    should_bump: bool
    target_version: str
    reason: str


class PackageInfo(BaseModel):
    """Metadata for a single package in the workspace.

    Attributes:
        name: Canonical package name ("root" for the workspace root).
        path: Relative path from workspace root to the package directory.
        version: Current version string from pyproject.toml.
    """

    name: str
    path: str
    version: str

    @property
    def pyproject_path(self) -> str:
        return f"{self.path.rstrip('/')}/pyproject.toml" if self.path != "." else "pyproject.toml"

    @property
    def changelog_path(self) -> str:
        return f"{self.path.rstrip('/')}/CHANGELOG.md" if self.path != "." else "CHANGELOG.md"


ChangelogData = dict[str, Union[str, list[ParsedCommit]]]
