"""Per-package changelog orchestration.

PackageChangelog ties the pieces together for one package: it walks the
package's release tags between two revisions, reads and partitions the
commits of every tag boundary, decides the next version for the commits
since the last tag, and renders the result with a template, optionally
merged over the CHANGELOG.md already on disk.

Usage:
    changelog = PackageChangelog(package, DefaultTemplate(package.name, config), config)
    changelog.set_range("pkg-a/v1.0.0", "HEAD")
    changelog.get_version_data().target_version
    changelog.generate_merged_changelog()
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from .commits import read_commit
from .config import CommitRuleConfig
from .errors import StateError
from .models import UNRELEASED, ChangelogData, PackageInfo, ParsedCommit, VersionData
from .packages import ROOT_PACKAGE, read_changelog, read_version
from .shell import git_lines
from .tags import latest_package_tag, package_tags_in_range, package_versions, version_from_tag
from .templates import ChangelogTemplate
from .versions import decide

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _commit_time(commit: ParsedCommit) -> datetime:
    date = commit.info.date if commit.info else None
    if not date:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(date)
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def partition_commits(commits: list[ParsedCommit]) -> list[ParsedCommit]:
    """Keep merges plus the direct commits no PR claims, oldest first.

    A non-merge commit whose hash is enclosed by one of the merges' PRs is
    dropped here, since the PR section already lists it.
    """
    merges = [c for c in commits if c.message.is_merge]
    claimed = {
        pr_commit.hash
        for merge in merges
        if merge.pr is not None
        for pr_commit in merge.pr.pr_commits
        if pr_commit.hash
    }
    orphans = [c for c in commits if not c.message.is_merge and c.hash not in claimed]
    return sorted([*merges, *orphans], key=_commit_time)


def git_log_hashes(rev_range: str, *, merges: bool = False, path: str | None = None) -> list[str]:
    """List commit hashes in a range, optionally only merges or only a path."""
    args = ["log", rev_range, "--oneline", "--format=%H"]
    if merges:
        args.append("--merges")
    if path:
        args += ["--", path]
    return git_lines(*args)


class PackageChangelog:
    """Changelog and version decision for one package.

    Args:
        package: The package to analyse.
        template: Template used to render and parse changelog documents.
        config: Rule/presentation config (tag prefix, types).
        version_mode: If True, unreleased commits are filed under the
                      target version; otherwise under "[Unreleased]".
        root: Workspace root; defaults to the current directory.
    """

    def __init__(
        self,
        package: PackageInfo,
        template: ChangelogTemplate,
        config: CommitRuleConfig,
        version_mode: bool = True,
        root: Path | None = None,
    ) -> None:
        self.package = package
        self.template = template
        self.config = config
        self.version_mode = version_mode
        self.root = root
        self.from_ref: str | None = None
        self.to_ref: str | None = None
        self._changelog_data: ChangelogData | None = None
        self._version_data: VersionData | None = None

    def set_range(self, from_ref: str | None, to_ref: str | None = None) -> None:
        """Analyse the commits between two revisions.

        A package without a release tag starts from the version in its
        pyproject.toml, and drift is only checked against a release tag.

        Args:
            from_ref: Oldest revision (exclusive). None means from the first
                      commit.
            to_ref: Newest revision (inclusive), "HEAD" by default.

        Raises:
            CommitLookupError: If a commit in the range can't be read.
            InvalidVersionError: If the baseline version is malformed.
            VersionDriftError: If pyproject.toml was bumped by hand.
        """
        self._changelog_data = None
        self._version_data = None
        self.from_ref = from_ref
        self.to_ref = to_ref or "HEAD"

        name = self.package.name
        prefix = self.config.tag_prefix

        last_tag = latest_package_tag(name, prefix, merged=self.to_ref)
        disk_version: str | None = read_version(self.package, self.root)
        tagged_version = version_from_tag(last_tag, name, prefix) if last_tag else None
        if tagged_version:
            current_version = tagged_version
        else:
            # Never released: the pyproject version is the baseline
            current_version, disk_version = disk_version or "0.0.0", None
        logger.info("%s: last tag %s (version %s)", name, last_tag or "<none>", current_version)

        unreleased = self.commits_in_range(last_tag, self.to_ref)
        version_data = decide(
            current_version,
            unreleased,
            existing_versions=package_versions(name, prefix),
            disk_version=disk_version,
            tag_prefix=prefix,
            package=name,
        )

        data: ChangelogData = {}
        for previous, tag in package_tags_in_range(name, from_ref, self.to_ref, prefix):
            version = version_from_tag(tag, name, prefix)
            if version:
                data[version] = partition_commits(self.commits_in_range(previous, tag))

        if unreleased:
            has_target = version_data.should_bump or version_data.bump_type == "synced"
            label = version_data.target_version if self.version_mode and has_target else UNRELEASED
            data[label] = partition_commits(unreleased)

        self._changelog_data = data
        self._version_data = version_data

    def commits_in_range(self, start: str | None, end: str) -> list[ParsedCommit]:
        """Read the commits of a range that concern this package.

        The root package takes every commit and every merge. Other packages
        take commits touching their directory plus merges whose PR touched
        it.
        """
        rev_range = f"{start}..{end}" if start else end

        if self.package.name == ROOT_PACKAGE:
            hashes = git_log_hashes(rev_range, path=".")
            merge_hashes = git_log_hashes(rev_range, merges=True)
        else:
            path = self.package.path
            hashes = git_log_hashes(rev_range, path=path)
            merge_hashes = [
                h
                for h in git_log_hashes(rev_range, merges=True)
                if git_log_hashes(f"{h}^..{h}^2", path=path)
            ]

        # Preserve git's order while dropping repeats
        unique = list(dict.fromkeys([*hashes, *merge_hashes]))
        return [read_commit(h) for h in unique]

    def _require_data(self) -> ChangelogData:
        if self._changelog_data is None:
            raise StateError(f"Changelog for {self.package.name} not analysed: call set_range first")
        return self._changelog_data

    def get_version_data(self) -> VersionData:
        if self._version_data is None:
            raise StateError(f"Version data for {self.package.name} not determined: call set_range first")
        return self._version_data

    def get_changelog_data(self) -> ChangelogData:
        return self._require_data()

    def has_commits(self) -> bool:
        return self.get_commit_count() > 0

    def get_commit_count(self) -> int:
        """Count analysed commits, including the ones enclosed in PRs."""
        total = 0
        for entry in self._require_data().values():
            if isinstance(entry, str):
                continue
            for commit in entry:
                total += 1 + (len(commit.pr.pr_commits) if commit.pr else 0)
        return total

    def merge_with_existing(self) -> ChangelogData:
        """Overlay the new versions on the ones parsed from CHANGELOG.md.

        Versions present in both are taken from the new data.
        """
        data = self._require_data()
        existing = self.template.parse_versions(read_changelog(self.package, self.root))
        return {**existing, **data}

    def generate_changelog(self) -> str:
        """Render only the versions computed by set_range()."""
        self.get_version_data()
        return self.template.render(self._require_data())

    def generate_merged_changelog(self) -> str:
        """Render the computed versions merged over the existing changelog."""
        self.get_version_data()
        return self.template.render(self.merge_with_existing())
