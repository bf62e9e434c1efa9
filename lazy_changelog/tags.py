"""Per-package release tags.

Tags follow the pattern {package-name}/{prefix}{version}, e.g.
"pkg-a/v1.2.3". The version of a package at a tag is read from the tag
name itself, so no checkout is needed to walk the release history.
"""

from __future__ import annotations

import logging

from .errors import InvalidVersionError
from .shell import git_lines
from .versions import parse_version, tag_name

logger = logging.getLogger(__name__)


def version_from_tag(tag: str, package: str, prefix: str = "v") -> str | None:
    """Extract the version from a package tag.

    Returns None for tags that belong to another package or don't carry a
    parseable version.

    Examples:
        version_from_tag("pkg-a/v1.2.3", "pkg-a") → "1.2.3"
        version_from_tag("pkg-b/v1.2.3", "pkg-a") → None
    """
    head = tag_name(package, "", prefix)
    if not tag.startswith(head):
        return None
    version = tag[len(head) :]
    try:
        parse_version(version)
    except InvalidVersionError:
        return None
    return version


def list_package_tags(package: str, prefix: str = "v", merged: str | None = None) -> list[str]:
    """List a package's release tags, newest version first.

    Args:
        package: Package name.
        prefix: Version prefix inside the tag.
        merged: If given, only tags reachable from this revision.
    """
    args = ["tag", "--list", tag_name(package, "*", prefix), "--sort=-v:refname"]
    if merged:
        args.append(f"--merged={merged}")
    tags = [t for t in git_lines(*args, check=False) if version_from_tag(t, package, prefix)]
    # git's version sort doesn't know about our prefix rules; re-sort numerically
    tags.sort(
        key=lambda t: parse_version(version_from_tag(t, package, prefix) or "0"),
        reverse=True,
    )
    return tags


def package_versions(package: str, prefix: str = "v") -> list[str]:
    """All released versions of a package, newest first."""
    return [version_from_tag(t, package, prefix) or "" for t in list_package_tags(package, prefix)]


def latest_package_tag(package: str, prefix: str = "v", merged: str | None = None) -> str | None:
    tags = list_package_tags(package, prefix, merged)
    return tags[0] if tags else None


def package_tags_in_range(
    package: str, from_ref: str | None, to_ref: str, prefix: str = "v"
) -> list[tuple[str | None, str]]:
    """Find package tags released between two revisions.

    A tag is in range when it is reachable from `to_ref` but not from
    `from_ref`. Each tag is paired with the boundary before it: the
    previous tag in range, or `from_ref` for the oldest one.

    Returns:
        (previous boundary, tag) pairs, oldest first.
    """
    reachable = list_package_tags(package, prefix, merged=to_ref)
    if from_ref:
        excluded = set(list_package_tags(package, prefix, merged=from_ref))
        reachable = [t for t in reachable if t not in excluded]

    ordered = sorted(
        reachable,
        key=lambda t: parse_version(version_from_tag(t, package, prefix) or "0"),
    )
    pairs: list[tuple[str | None, str]] = []
    previous = from_ref
    for tag in ordered:
        pairs.append((previous, tag))
        previous = tag
    logger.debug("Tags in range %s..%s for %s: %s", from_ref, to_ref, package, ordered)
    return pairs
