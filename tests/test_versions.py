"""Tests for lazy_changelog.versions."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from lazy_changelog.errors import InvalidVersionError, VersionDriftError
from lazy_changelog.models import ParsedCommit
from lazy_changelog.versions import (
    bump_version,
    compare_versions,
    decide,
    determine_bump_type,
    parse_version,
    tag_name,
)

CommitFactory = Callable[..., ParsedCommit]


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 3

    def test_two_part_version(self) -> None:
        v = parse_version("1.2")
        assert v.major == 1
        assert v.minor == 2
        assert v.patch == 0

    def test_single_part_version(self) -> None:
        v = parse_version("5")
        assert (v.major, v.minor, v.patch) == (5, 0, 0)

    def test_non_numeric_raises(self) -> None:
        with pytest.raises(InvalidVersionError, match="1.x.3"):
            parse_version("1.x.3")

    def test_empty_raises(self) -> None:
        with pytest.raises(InvalidVersionError):
            parse_version("")


class TestBumpVersion:
    def test_major_zeros_lower(self) -> None:
        assert bump_version("1.2.3", "major") == "2.0.0"

    def test_minor_zeros_patch(self) -> None:
        assert bump_version("1.2.3", "minor") == "1.3.0"

    def test_patch(self) -> None:
        assert bump_version("1.2.3", "patch") == "1.2.4"

    def test_pads_short_versions(self) -> None:
        assert bump_version("1", "minor") == "1.1.0"

    def test_none_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            bump_version("1.2.3", "none")

    def test_patch_past_nine(self) -> None:
        assert bump_version("1.0.99", "patch") == "1.0.100"


class TestTagName:
    def test_package_tag(self) -> None:
        assert tag_name("pkg-a", "1.0.0") == "pkg-a/v1.0.0"

    def test_custom_prefix(self) -> None:
        assert tag_name("pkg-a", "1.0.0", "release-") == "pkg-a/release-1.0.0"

    def test_without_package(self) -> None:
        assert tag_name("", "1.0.0") == "v1.0.0"


class TestCompareVersions:
    def test_numeric_not_lexical(self) -> None:
        assert compare_versions("1.10.0", "1.9.0") > 0

    def test_equal_after_padding(self) -> None:
        assert compare_versions("1.2", "1.2.0") == 0


class TestDetermineBumpType:
    def test_feat_beats_fix(self, make_commit: CommitFactory) -> None:
        commits = [make_commit("feat(core): add parser"), make_commit("fix(ui): null check")]
        assert determine_bump_type(commits) == "minor"

    @pytest.mark.parametrize(
        "messages",
        [
            ["fix!: drop python 3.8 support"],
            ["feat: a", "docs: b", "chore!: remove old cli flags"],
            ["refactor: x\n\nBREAKING CHANGE: config keys renamed", "feat: y"],
        ],
    )
    def test_breaking_is_always_major(
        self, make_commit: CommitFactory, messages: list[str]
    ) -> None:
        assert determine_bump_type([make_commit(m) for m in messages]) == "major"

    def test_anything_else_is_patch(self, make_commit: CommitFactory) -> None:
        commits = [make_commit("docs: readme"), make_commit("random text")]
        assert determine_bump_type(commits) == "patch"


class TestDecide:
    def test_no_commits(self) -> None:
        data = decide("1.2.3", [])
        assert data.bump_type == "none"
        assert data.should_bump is False
        assert data.target_version == "1.2.3"
        assert data.reason == "No commits in range"

    def test_minor_bump(self, make_commit: CommitFactory) -> None:
        commits = [make_commit("feat(core): add parser"), make_commit("fix(ui): null check")]

        data = decide("1.2.3", commits)

        assert data.bump_type == "minor"
        assert data.should_bump is True
        assert data.target_version == "1.3.0"
        assert data.reason == "New minor version bump to 1.3.0"

    def test_target_already_tagged(self, make_commit: CommitFactory) -> None:
        data = decide(
            "1.2.3",
            [make_commit("fix: a")],
            existing_versions=["1.2.3", "1.2.4"],
            package="pkg-a",
        )

        assert data.bump_type == "none"
        assert data.should_bump is False
        assert "pkg-a/v1.2.4" in data.reason

    def test_synced_when_disk_matches_target(self, make_commit: CommitFactory) -> None:
        data = decide("1.2.3", [make_commit("feat: a")], disk_version="1.3.0")

        assert data.bump_type == "synced"
        assert data.should_bump is False
        assert data.target_version == "1.3.0"

    def test_disk_equal_to_current_bumps(self, make_commit: CommitFactory) -> None:
        data = decide("1.2.3", [make_commit("fix: a")], disk_version="1.2.3")
        assert data.should_bump is True
        assert data.target_version == "1.2.4"

    def test_drift_raises(self, make_commit: CommitFactory) -> None:
        with pytest.raises(VersionDriftError, match="pkg-a version 2.0.0"):
            decide("1.2.3", [make_commit("fix: a")], disk_version="2.0.0", package="pkg-a")

    def test_disk_behind_is_not_drift(self, make_commit: CommitFactory) -> None:
        data = decide("1.2.3", [make_commit("fix: a")], disk_version="1.0.0")
        assert data.should_bump is True

    def test_invalid_current_version(self, make_commit: CommitFactory) -> None:
        with pytest.raises(InvalidVersionError, match="abc"):
            decide("abc", [make_commit("fix: a")])

    @pytest.mark.parametrize("message", ["fix: a", "feat: b", "feat!: breaking api change"])
    @pytest.mark.parametrize("current", ["0.0.0", "0.9.9", "1.2.3", "9.99.999"])
    def test_target_greater_than_current(
        self, make_commit: CommitFactory, message: str, current: str
    ) -> None:
        data = decide(current, [make_commit(message)])
        assert data.should_bump is True
        assert compare_versions(data.target_version, current) > 0

    def test_is_deterministic(self, make_commit: CommitFactory) -> None:
        commits = [make_commit("feat: a"), make_commit("fix: b")]
        assert decide("1.0.0", commits) == decide("1.0.0", commits)
