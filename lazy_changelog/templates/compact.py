"""Flat changelog template.

Every commit of a version, including the ones enclosed in pull requests,
is listed once under its commit type.
"""

from __future__ import annotations

from ..config import CommitRuleConfig
from ..models import ChangelogData, ParsedCommit
from . import base


def flatten_commits(commits: list[ParsedCommit]) -> list[ParsedCommit]:
    """Unpack PR commits and drop repeated hashes, keeping first occurrences.

    A merge whose PR has no recoverable commits stands in for itself.
    """
    flat: list[ParsedCommit] = []
    for commit in commits:
        if commit.pr is not None and commit.pr.pr_commits:
            flat.extend(commit.pr.pr_commits)
        else:
            flat.append(commit)

    seen: set[str] = set()
    unique: list[ParsedCommit] = []
    for commit in flat:
        if commit.hash:
            if commit.hash in seen:
                continue
            seen.add(commit.hash)
        unique.append(commit)
    return unique


class CompactTemplate:
    """Minimal changelog: one bullet per commit, grouped by type."""

    def __init__(self, package: str, config: CommitRuleConfig) -> None:
        self.package = package
        self.config = config

    def render(self, data: ChangelogData) -> str:
        blocks: list[str] = []
        for version in base.sorted_versions(data):
            entry = data[version]
            if isinstance(entry, str):
                blocks.append(entry)
            else:
                blocks.append(self.render_version(version, entry))
        return base.render_document(f"# {self.package} Changelog", blocks)

    def parse_versions(self, content: str) -> ChangelogData:
        return base.parse_versions(content, self.config.tag_prefix)

    def sort_versions(self, a: str, b: str) -> int:
        return base.sort_versions(a, b)

    def render_version(self, version: str, commits: list[ParsedCommit]) -> str:
        parts = [f"## {version}"]
        for commit_type, of_type in base.group_by_type(flatten_commits(commits), self.config):
            lines = [f"### {self.config.type_title(commit_type)}", ""]
            lines += [f"- {self.format_commit(c)}" for c in of_type]
            parts.append("\n".join(lines))
        return "\n\n".join(parts)

    def format_commit(self, commit: ParsedCommit) -> str:
        line = f"{commit.message.type} {commit.message.description}"
        if commit.message.scopes:
            line += f" ({', '.join(commit.message.scopes)})"
        return f"{line} ({base.hash_link(self.config, commit)}) {base.author_credit(commit)}"
