"""Tests for lazy_changelog.toml."""

from __future__ import annotations

from pathlib import Path

import tomlkit

from lazy_changelog.toml import (
    get_project_name,
    get_project_version,
    get_repo_url,
    get_tool_settings,
    get_workspace_member_globs,
    load_pyproject,
    save_pyproject,
    set_project_version,
)


class TestLoadSavePyproject:
    def test_save_preserves_content(self, workspace: Path) -> None:
        path = workspace / "packages" / "pkg-a" / "pyproject.toml"
        doc = load_pyproject(path)
        doc["project"]["version"] = "9.9.9"  # type: ignore[index]
        save_pyproject(path, doc)

        reloaded = load_pyproject(path)
        assert get_project_version(reloaded) == "9.9.9"
        assert get_project_name(reloaded, "") == "pkg-a"


class TestSetProjectVersion:
    def test_keeps_comments(self, workspace: Path) -> None:
        path = workspace / "packages" / "pkg-a" / "pyproject.toml"

        set_project_version(path, "2.0.0")

        text = path.read_text()
        assert "# keep me" in text
        assert get_project_version(load_pyproject(path)) == "2.0.0"

    def test_creates_project_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text("")

        set_project_version(path, "0.1.0")

        assert get_project_version(load_pyproject(path)) == "0.1.0"


class TestGetProjectName:
    def test_returns_name(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        assert get_project_name(sample_toml_doc, "fallback") == "my-package"

    def test_normalizes_name(self) -> None:
        doc = tomlkit.parse('[project]\nname = "My_Package"')
        assert get_project_name(doc, "fallback") == "my-package"

    def test_returns_fallback_when_no_project(self) -> None:
        doc = tomlkit.parse("")
        assert get_project_name(doc, "fallback") == "fallback"


class TestGetProjectVersion:
    def test_returns_version(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        assert get_project_version(sample_toml_doc) == "2.0.0"

    def test_returns_default_when_missing(self) -> None:
        doc = tomlkit.parse("[project]")
        assert get_project_version(doc) == "0.0.0"


class TestGetWorkspaceMemberGlobs:
    def test_returns_members(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        assert get_workspace_member_globs(sample_toml_doc) == ["packages/*", "libs/*"]

    def test_no_workspace(self) -> None:
        assert get_workspace_member_globs(tomlkit.parse("[project]")) == []


class TestToolSettings:
    def test_returns_plain_values(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        settings = get_tool_settings(sample_toml_doc)
        assert settings == {"tag-prefix": "release-", "scopes": ["api"]}
        assert type(settings["scopes"]) is list

    def test_missing_table(self) -> None:
        assert get_tool_settings(tomlkit.parse("[project]")) == {}


class TestGetRepoUrl:
    def test_prefers_repository_url(self, sample_toml_doc: tomlkit.TOMLDocument) -> None:
        assert get_repo_url(sample_toml_doc) == "https://github.com/acme/my-package"

    def test_tool_setting_wins(self) -> None:
        doc = tomlkit.parse(
            '[project.urls]\nRepository = "https://a"\n\n'
            '[tool.lazy-changelog]\nrepo-url = "https://b.example/repo.git"\n'
        )
        assert get_repo_url(doc) == "https://b.example/repo"

    def test_none_configured(self) -> None:
        assert get_repo_url(tomlkit.parse("[project]")) == ""
