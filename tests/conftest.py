"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import tomlkit

from lazy_changelog.commits import parse_message
from lazy_changelog.config import CommitRuleConfig, build_config
from lazy_changelog.models import CommitInfo, ParsedCommit, PRInfo

CommitFactory = Callable[..., ParsedCommit]


@pytest.fixture
def make_commit() -> CommitFactory:
    """Build a ParsedCommit from a raw message."""

    def factory(
        message: str,
        commit_hash: str = "abc1234def5678",
        author: str | None = "Alice",
        date: str | None = "2024-01-15T10:00:00+00:00",
        pr: PRInfo | None = None,
    ) -> ParsedCommit:
        return ParsedCommit(
            message=parse_message(message),
            info=CommitInfo(hash=commit_hash, author=author, date=date),
            pr=pr,
        )

    return factory


@pytest.fixture
def config() -> CommitRuleConfig:
    """Default rules with a couple of workspace scopes and a repo URL."""
    return build_config(
        scopes=["root", "core", "ui"], repo_url="https://github.com/acme/mono"
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a uv workspace with two packages."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "mono"
version = "0.5.0"

[project.urls]
Repository = "https://github.com/acme/mono.git"

[tool.uv.workspace]
members = ["packages/*"]

[tool.lazy-changelog]
tag-prefix = "v"

[tool.lazy-changelog.description]
max-length = 72
"""
    )
    for name, version in (("pkg-a", "1.2.3"), ("pkg_b", "0.1.0")):
        package_dir = tmp_path / "packages" / name
        package_dir.mkdir(parents=True)
        (package_dir / "pyproject.toml").write_text(
            f'[project]\nname = "{name}"\nversion = "{version}"  # keep me\n'
        )
    # A directory without pyproject.toml is not a package
    (tmp_path / "packages" / "docs").mkdir()
    return tmp_path


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"

[project.urls]
Homepage = "https://example.com"
Repository = "https://github.com/acme/my-package/"

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.lazy-changelog]
tag-prefix = "release-"
scopes = ["api"]
"""
    return tomlkit.parse(content)
