"""Version parsing, bumping and the bump decision.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0"),
and decides whether a set of commits warrants a release.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import semver

from .errors import InvalidVersionError, VersionDriftError
from .models import BumpType, ParsedCommit, VersionData


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3" → "1.2.3"

    Only the first 3 components are used (major.minor.patch).
    Prerelease/build metadata is not supported.

    Raises:
        InvalidVersionError: If a component is not a number.
    """
    parts = version_str.strip().split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    if not all(part.isdigit() for part in parts[:3]):
        raise InvalidVersionError(version_str)
    try:
        return semver.Version.parse(".".join(parts[:3]))
    except ValueError as exc:
        raise InvalidVersionError(version_str) from exc


def bump_version(version_str: str, bump_type: BumpType) -> str:
    """Increment one component of a version and zero the lower ones.

    Examples:
        bump_version("1.2.3", "major") → "2.0.0"
        bump_version("1.2.3", "minor") → "1.3.0"
        bump_version("1.2", "patch") → "1.2.1"
    """
    version = parse_version(version_str)
    if bump_type == "major":
        return str(version.bump_major())
    if bump_type == "minor":
        return str(version.bump_minor())
    if bump_type == "patch":
        return str(version.bump_patch())
    raise ValueError(f"Cannot bump {version_str} with bump type {bump_type!r}")


def tag_name(package: str, version: str, prefix: str = "v") -> str:
    """Release tag of a package version, e.g. "pkg-a/v1.2.3"."""
    return f"{package}/{prefix}{version}" if package else f"{prefix}{version}"


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings numerically (negative when a < b)."""
    return parse_version(a).compare(parse_version(b))


def determine_bump_type(commits: Iterable[ParsedCommit]) -> BumpType:
    """Pick the bump for a non-empty set of commits.

    Any breaking commit means "major", otherwise any "feat" means
    "minor", otherwise "patch".
    """
    has_feature = False
    for commit in commits:
        if commit.message.is_breaking:
            return "major"
        if commit.message.type == "feat":
            has_feature = True
    return "minor" if has_feature else "patch"


def decide(
    current_version: str,
    commits: Sequence[ParsedCommit],
    existing_versions: Iterable[str] = (),
    disk_version: str | None = None,
    tag_prefix: str = "v",
    package: str = "",
) -> VersionData:
    """Decide whether and how a package should be bumped.

    Args:
        current_version: Version at the package's last release tag.
        commits: Commits since that tag touching the package.
        existing_versions: Versions that already have a release tag.
        disk_version: Version currently in the package's pyproject.toml.
        tag_prefix: Prefix used in tag names, for messages.
        package: Package name, for tag names in messages.

    Returns:
        The VersionData describing the decision.

    Raises:
        InvalidVersionError: If current_version is malformed.
        VersionDriftError: If the version on disk was bumped by hand past
                           the last tag to something other than the target.
    """
    if not commits:
        return VersionData(
            current_version=current_version,
            bump_type="none",
            should_bump=False,
            target_version=current_version,
            reason="No commits in range",
        )

    bump_type = determine_bump_type(commits)
    target = bump_version(current_version, bump_type)

    tag = tag_name(package, target, tag_prefix)
    if target in set(existing_versions):
        return VersionData(
            current_version=current_version,
            bump_type="none",
            should_bump=False,
            target_version=current_version,
            reason=f"Version {target} already exists as tag {tag}",
        )

    if target == current_version:
        return VersionData(
            current_version=current_version,
            bump_type="none",
            should_bump=False,
            target_version=current_version,
            reason=f"Package version {current_version} already matches next version {target}",
        )

    if disk_version is not None:
        if compare_versions(disk_version, target) == 0:
            return VersionData(
                current_version=current_version,
                bump_type="synced",
                should_bump=False,
                target_version=target,
                reason=f"Package version already bumped to {target}",
            )
        if compare_versions(disk_version, current_version) > 0:
            where = f"{package} " if package else ""
            raise VersionDriftError(
                f"Package {where}version {disk_version} is ahead of tagged version "
                f"{current_version} and does not match the computed target {target}"
            )

    return VersionData(
        current_version=current_version,
        bump_type=bump_type,
        should_bump=True,
        target_version=target,
        reason=f"New {bump_type} version bump to {target}",
    )
