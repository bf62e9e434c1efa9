"""TOML reading and writing utilities.

Uses tomlkit to preserve formatting and comments when modifying pyproject.toml
files. This is important for maintaining readable, diff-friendly files when
a version bump is written back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from packaging.utils import canonicalize_name

TOOL_TABLE = "lazy-changelog"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file.

    Returns a TOMLDocument that preserves formatting when modified and saved.
    """
    return tomlkit.parse(path.read_text())


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Save a TOMLDocument back to disk, preserving original formatting."""
    path.write_text(tomlkit.dumps(doc))


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Extract the canonical package name from [project].name.

    Names are normalized per PEP 503 (lowercase, hyphens instead of
    underscores) for consistent comparison with tag names and scopes.

    Args:
        doc: Parsed pyproject.toml document.
        fallback: Value to return if name is not specified.
    """
    return canonicalize_name(doc.get("project", {}).get("name", fallback))


def get_project_version(doc: tomlkit.TOMLDocument) -> str:
    """Extract version from [project].version, defaulting to '0.0.0'."""
    return str(doc.get("project", {}).get("version", "0.0.0"))


def set_project_version(path: Path, version: str) -> None:
    """Write [project].version, leaving the rest of the file untouched."""
    doc = load_pyproject(path)
    if "project" not in doc:
        doc["project"] = tomlkit.table()
    doc["project"]["version"] = version  # type: ignore[index]
    save_pyproject(path, doc)


def get_workspace_member_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Extract workspace member glob patterns from [tool.uv.workspace].

    These patterns (e.g., "packages/*", "libs/*") define which directories
    contain workspace packages. A repository without a workspace has no
    members; only its root package is then available.
    """
    members = doc.get("tool", {}).get("uv", {}).get("workspace", {}).get("members")
    return [str(m) for m in members] if members else []


def get_tool_settings(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Return [tool.lazy-changelog] as plain Python values (empty if absent)."""
    table = doc.get("tool", {}).get(TOOL_TABLE)
    return table.unwrap() if table is not None else {}


def get_repo_url(doc: tomlkit.TOMLDocument) -> str:
    """Find the repository URL used for commit and PR links.

    Checks [tool.lazy-changelog].repo-url, then [project.urls] entries
    named Repository/Source/Homepage (case-insensitive). A trailing ".git"
    is dropped.
    """
    url = get_tool_settings(doc).get("repo-url")
    if not url:
        urls = doc.get("project", {}).get("urls", {})
        by_key = {str(k).lower(): str(v) for k, v in urls.items()}
        url = next(
            (by_key[k] for k in ("repository", "source", "homepage") if k in by_key), ""
        )
    url = str(url).rstrip("/")
    return url[: -len(".git")] if url.endswith(".git") else url
