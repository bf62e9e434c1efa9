"""Tests for the lazy-changelog CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from lazy_changelog.cli import cli
from lazy_changelog.errors import VersionDriftError
from lazy_changelog.models import VersionData

MINOR = VersionData(
    current_version="1.2.3",
    bump_type="minor",
    should_bump=True,
    target_version="1.3.0",
    reason="New minor version bump to 1.3.0",
)


@pytest.fixture
def in_workspace(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(workspace)
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    return workspace


@pytest.fixture
def mock_changelog():
    """Patch PackageChangelog so that every package gets a minor bump."""
    with (
        patch("lazy_changelog.cli.PackageChangelog") as cls,
        patch("lazy_changelog.cli.latest_package_tag", return_value=None),
    ):
        instance = cls.return_value
        instance.get_version_data.return_value = MINOR
        instance.get_commit_count.return_value = 2
        instance.generate_merged_changelog.return_value = "# pkg-a Changelog\n\n## 1.3.0\n"
        yield instance


class TestPrepare:
    def test_writes_version_and_changelog(
        self, in_workspace: Path, mock_changelog: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = in_workspace / "github_output"

        cli(["prepare", "-p", "pkg-a", "--github-output", str(output)])

        pkg_dir = in_workspace / "packages" / "pkg-a"
        assert 'version = "1.3.0"' in (pkg_dir / "pyproject.toml").read_text()
        assert (pkg_dir / "CHANGELOG.md").read_text() == "# pkg-a Changelog\n\n## 1.3.0\n"
        assert output.read_text() == 'packages-to-deploy=["pkg-a"]\n'
        mock_changelog.set_range.assert_called_once_with(None, "HEAD")
        assert "1.2.3 → 1.3.0" in capsys.readouterr().out

    def test_from_ref_passed_through(self, in_workspace: Path, mock_changelog: MagicMock) -> None:
        cli(["prepare", "-p", "pkg-a", "--from", "abc123", "--to", "def456", "--dry-run"])

        mock_changelog.set_range.assert_called_once_with("abc123", "def456")

    def test_dry_run_writes_nothing(
        self, in_workspace: Path, mock_changelog: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cli(["prepare", "-p", "pkg-a", "--dry-run"])

        pkg_dir = in_workspace / "packages" / "pkg-a"
        assert 'version = "1.2.3"' in (pkg_dir / "pyproject.toml").read_text()
        assert not (pkg_dir / "CHANGELOG.md").exists()
        assert "## 1.3.0" in capsys.readouterr().out

    def test_no_commits_skips_package(self, in_workspace: Path, mock_changelog: MagicMock) -> None:
        mock_changelog.get_commit_count.return_value = 0
        output = in_workspace / "github_output"

        cli(["prepare", "-p", "pkg-a", "--github-output", str(output)])

        assert not (in_workspace / "packages" / "pkg-a" / "CHANGELOG.md").exists()
        assert output.read_text() == "packages-to-deploy=[]\n"

    def test_failed_package_does_not_stop_others(
        self, in_workspace: Path, mock_changelog: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        mock_changelog.set_range.side_effect = [VersionDriftError("pkg-a drifted"), None]
        output = in_workspace / "github_output"

        with pytest.raises(SystemExit) as exc_info:
            cli(["prepare", "-p", "pkg-a", "-p", "pkg-b", "--github-output", str(output)])

        assert exc_info.value.code == 1
        assert output.read_text() == 'packages-to-deploy=["pkg-b"]\n'
        err = capsys.readouterr().err
        assert "pkg-a drifted" in err
        assert "Failed to prepare: pkg-a" in err

    def test_unknown_package(self, in_workspace: Path, mock_changelog: MagicMock) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli(["prepare", "-p", "nope"])
        assert exc_info.value.code == 1

    def test_defaults_to_all_packages(self, in_workspace: Path, mock_changelog: MagicMock) -> None:
        cli(["prepare", "--dry-run", "--template", "compact"])

        assert mock_changelog.set_range.call_count == 3


class TestCheck:
    def test_valid_message(self, in_workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        cli(["check", "-m", "feat(pkg-a): add login form"])
        assert "valid" in capsys.readouterr().out

    def test_invalid_message(self, in_workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli(["check", "-m", "feat(nope): add login form."])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "scopes | invalid scope(s)" in err
        assert "description | should not end with a period" in err

    def test_message_file_skips_comments(self, in_workspace: Path) -> None:
        path = in_workspace / "COMMIT_EDITMSG"
        path.write_text("fix(pkg-b): handle empty input\n\n# Please enter the commit message\n")

        cli(["check", "-F", str(path)])

    def test_requires_a_source(self, in_workspace: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli(["check"])
        assert exc_info.value.code == 2
