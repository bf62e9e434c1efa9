"""Verbose changelog template.

Each version lists one section per merged pull request (category, branch,
PR link, commit count and a collapsible commit list), followed by the
commits that landed directly, grouped by commit type.
"""

from __future__ import annotations

from ..config import PR_CATEGORIES, CommitRuleConfig
from ..models import UNRELEASED, ChangelogData, ParsedCommit
from . import base

HEADER = """\
# Changelog ({package})

[![Keep a Changelog](https://img.shields.io/badge/changelog-Keep%20a%20Changelog%20v1.0.0-%23E05735)](https://keepachangelog.com)
[![Semantic Versioning](https://img.shields.io/badge/semver-semantic%20versioning%20v2.0.0-%23E05735)](https://semver.org)

All notable changes to this project will be documented in this file.
The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html)."""

ORPHAN_HEADER = """\
### 📝 Direct Commits

*The following changes were committed directly:*"""


class DefaultTemplate:
    """Keep-a-changelog style document with PR sections and badges."""

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
        return base.render_document(HEADER.format(package=self.package), blocks)

    def parse_versions(self, content: str) -> ChangelogData:
        return base.parse_versions(content, self.config.tag_prefix)

    def sort_versions(self, a: str, b: str) -> int:
        return base.sort_versions(a, b)

    def version_header(self, version: str) -> str:
        if version == UNRELEASED:
            return f"## {UNRELEASED}"
        return f"## {self.config.tag_prefix}{version}"

    def render_version(self, version: str, commits: list[ParsedCommit]) -> str:
        sections = [self.version_header(version)]
        pr_commits = [c for c in commits if c.pr is not None]
        direct = [c for c in commits if c.pr is None]

        sections.extend(self.render_pr(c) for c in pr_commits)
        if direct:
            sections.append(self.render_direct(direct))
        return "\n\n".join(s.rstrip() for s in sections)

    def render_pr(self, merge: ParsedCommit) -> str:
        """Render one merged pull request."""
        pr = merge.pr
        category = PR_CATEGORIES.get(pr.pr_category, PR_CATEGORIES["other"])
        commits = pr.pr_commits
        count = len(commits)

        category_badge = base.badge("category", category.label, "495057", category.label)
        number_badge = base.badge("PR", f"#{pr.pr_number}", "blue", f"#{pr.pr_number}")
        count_badge = base.badge("commits", str(count), "green", f"{count} commits")
        title = (
            f"### {category.emoji} {pr.pr_branch_name} {category_badge} "
            f'<a href="{base.pr_url(self.config, pr.pr_number)}">{number_badge}</a> {count_badge}'
        )

        summary = "\n".join(merge.message.body_lines) or merge.message.description
        lines = [
            title,
            "",
            summary,
            "",
            "<details>",
            "<summary><strong>📋 Commits</strong> (Click to expand)</summary>",
            "",
        ]
        lines += [self.commit_line(c) for c in commits]
        lines += ["", "</details>"]
        return "\n".join(lines)

    def render_direct(self, commits: list[ParsedCommit]) -> str:
        """Render commits that didn't come through a PR, grouped by type."""
        parts = [ORPHAN_HEADER]
        for commit_type, of_type in base.group_by_type(commits, self.config):
            lines = [
                "<details>",
                f"<summary><strong>{self.config.type_title(commit_type)}</strong> (Click to expand)</summary>",
                "",
            ]
            lines += [self.commit_line(c) for c in of_type]
            lines += ["", "</details>"]
            parts.append("\n".join(lines))
        return "\n\n".join(parts)

    def commit_line(self, commit: ParsedCommit) -> str:
        return (
            f"- {base.type_badge(self.config, commit)} {commit.message.description} "
            f"({base.hash_link(self.config, commit)}) {base.author_credit(commit)}"
        )
