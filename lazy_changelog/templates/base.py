"""Helpers shared by the changelog templates.

Both templates render a ChangelogData mapping into markdown and parse a
rendered document back into per-version blocks. They share the version
header grammar, version ordering, link and badge formatting and commit
type ordering defined here.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from typing import Protocol
from urllib.parse import quote

from ..config import CommitRuleConfig
from ..errors import InvalidVersionError
from ..models import UNRELEASED, ChangelogData, ParsedCommit
from ..versions import parse_version


class ChangelogTemplate(Protocol):
    """Renders changelog data to markdown and parses it back."""

    def render(self, data: ChangelogData) -> str: ...

    def parse_versions(self, content: str) -> ChangelogData: ...

    def sort_versions(self, a: str, b: str) -> int: ...


def version_header_re(prefix: str) -> re.Pattern[str]:
    """Match "## [Unreleased]" and "## {prefix?}X.Y.Z" header lines."""
    return re.compile(
        rf"^## (?:(?P<unreleased>\[Unreleased\])|(?:{re.escape(prefix)})?(?P<version>\d+\.\d+\.\d+))"
    )


def parse_versions(content: str, prefix: str = "v") -> ChangelogData:
    """Split a changelog document into version blocks.

    Each block runs from its version header to the line before the next
    one and is kept verbatim (trailing blank lines trimmed), keyed by the
    bare version or "[Unreleased]". Anything before the first version
    header is the document header and is not returned.
    """
    header_re = version_header_re(prefix)
    versions: ChangelogData = {}
    current: str | None = None
    block: list[str] = []

    for line in content.split("\n"):
        match = header_re.match(line)
        if match:
            if current is not None:
                versions[current] = "\n".join(block).rstrip()
            current = UNRELEASED if match.group("unreleased") else match.group("version")
            block = [line]
        elif current is not None:
            block.append(line)

    if current is not None:
        versions[current] = "\n".join(block).rstrip()
    return versions


def _version_key(version: str) -> tuple[int, int, int]:
    try:
        v = parse_version(version)
    except InvalidVersionError:
        return (0, 0, 0)
    return (v.major, v.minor, v.patch)


def sort_versions(a: str, b: str) -> int:
    """Comparator putting "[Unreleased]" first, then newest versions first."""
    if a == b:
        return 0
    if a == UNRELEASED:
        return -1
    if b == UNRELEASED:
        return 1
    key_a, key_b = _version_key(a), _version_key(b)
    if key_a == key_b:
        return 0
    return -1 if key_a > key_b else 1


def sorted_versions(versions: Iterable[str]) -> list[str]:
    return sorted(versions, key=functools.cmp_to_key(sort_versions))


def render_document(header: str, blocks: Iterable[str]) -> str:
    """Join the document header and version blocks with blank lines."""
    parts = [header.rstrip(), *(b.rstrip() for b in blocks)]
    return "\n\n".join(p for p in parts if p) + "\n"


def shields_escape(text: str) -> str:
    """Escape text for a shields.io static badge path segment."""
    return quote(text.replace("-", "--").replace("_", "__"), safe="")


def badge(label: str, message: str, color: str, alt: str) -> str:
    url = f"https://img.shields.io/badge/{shields_escape(label)}-{shields_escape(message)}-{color}?style=flat"
    return f'<img src="{url}" alt="{alt}" style="vertical-align: middle;" />'


def commit_url(config: CommitRuleConfig, commit: ParsedCommit) -> str | None:
    if not commit.hash or not config.repo_url:
        return None
    return f"{config.repo_url}/commit/{commit.hash}"


def pr_url(config: CommitRuleConfig, pr_number: str) -> str:
    return f"{config.repo_url}/pull/{pr_number}" if config.repo_url else f"#{pr_number}"


def short_hash(commit: ParsedCommit) -> str:
    return commit.hash[:7] if commit.hash else "unknown"


def hash_link(config: CommitRuleConfig, commit: ParsedCommit) -> str:
    """Short hash, linked to the commit when a repo URL is configured."""
    url = commit_url(config, commit)
    return f"[{short_hash(commit)}]({url})" if url else f"`{short_hash(commit)}`"


def author_credit(commit: ParsedCommit) -> str:
    author = (commit.info.author if commit.info else None) or "Unknown"
    credit = f"by **{author}**"
    if "@" in author:
        credit += f" [{author}](mailto:{author})"
    return credit


def type_badge(config: CommitRuleConfig, commit: ParsedCommit) -> str:
    """Coloured type(scope) badge, linked to the commit when possible."""
    commit_type = commit.message.type
    scopes = ",".join(s.lower() for s in commit.message.scopes) or "noscope"
    img = badge(commit_type, scopes, config.badge_color(commit_type), commit_type)
    url = commit_url(config, commit)
    return f'<a href="{url}">{img}</a>' if url else img


def group_by_type(
    commits: Iterable[ParsedCommit], config: CommitRuleConfig
) -> list[tuple[str, list[ParsedCommit]]]:
    """Group commits by type, in display order, skipping empty groups."""
    commits = list(commits)
    order = config.type_order(c.message.type for c in commits)
    groups: list[tuple[str, list[ParsedCommit]]] = []
    for commit_type in order:
        of_type = [c for c in commits if c.message.type == commit_type]
        if of_type:
            groups.append((commit_type, of_type))
    return groups
