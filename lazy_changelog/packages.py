"""Workspace package discovery and per-package files.

Reads [tool.uv.workspace].members from the root pyproject.toml to find
package directories. The workspace root itself is always available as
the "root" package.
"""

from __future__ import annotations

import glob
from pathlib import Path

from .config import CommitRuleConfig, build_config
from .errors import PackageNotFoundError
from .models import PackageInfo
from .toml import (
    get_project_name,
    get_project_version,
    get_repo_url,
    get_tool_settings,
    get_workspace_member_globs,
    load_pyproject,
    set_project_version,
)

ROOT_PACKAGE = "root"


def discover_packages(root: Path | None = None) -> dict[str, PackageInfo]:
    """Scan the workspace and discover all packages.

    Args:
        root: Workspace root. Defaults to the current directory.

    Returns:
        Map of package name to PackageInfo, "root" first, members in
        glob order.
    """
    root = root or Path.cwd()
    root_doc = load_pyproject(root / "pyproject.toml")

    packages: dict[str, PackageInfo] = {
        ROOT_PACKAGE: PackageInfo(
            name=ROOT_PACKAGE, path=".", version=get_project_version(root_doc)
        )
    }

    # Expand globs to find all package directories
    for pattern in get_workspace_member_globs(root_doc):
        for match in sorted(glob.glob(str(root / pattern))):
            d = Path(match)
            if not (d / "pyproject.toml").exists():
                continue
            doc = load_pyproject(d / "pyproject.toml")
            name = get_project_name(doc, d.name)
            packages[name] = PackageInfo(
                name=name,
                path=str(d.relative_to(root)),
                version=get_project_version(doc),
            )

    return packages


def get_package(name: str, root: Path | None = None) -> PackageInfo:
    """Look up a single package by name.

    Raises:
        PackageNotFoundError: If no workspace member has that name.
    """
    packages = discover_packages(root)
    if name not in packages:
        raise PackageNotFoundError(
            f"Package {name} not found. Available: {', '.join(packages)}"
        )
    return packages[name]


def load_config(root: Path | None = None) -> CommitRuleConfig:
    """Build the rule/template config from the root pyproject.toml.

    Scopes default to the names of all workspace packages.
    """
    root = root or Path.cwd()
    doc = load_pyproject(root / "pyproject.toml")
    return build_config(
        get_tool_settings(doc),
        scopes=discover_packages(root).keys(),
        repo_url=get_repo_url(doc),
    )


def read_version(package: PackageInfo, root: Path | None = None) -> str:
    """Read the package version currently on disk."""
    root = root or Path.cwd()
    return get_project_version(load_pyproject(root / package.pyproject_path))


def write_version(package: PackageInfo, version: str, root: Path | None = None) -> None:
    root = root or Path.cwd()
    set_project_version(root / package.pyproject_path, version)


def read_changelog(package: PackageInfo, root: Path | None = None) -> str:
    """Read the package's CHANGELOG.md, or "" when it doesn't exist yet."""
    path = (root or Path.cwd()) / package.changelog_path
    return path.read_text() if path.exists() else ""


def write_changelog(package: PackageInfo, content: str, root: Path | None = None) -> Path:
    path = (root or Path.cwd()) / package.changelog_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path
