"""Commit type and rule configuration.

A single CommitRuleConfig value is built per run and handed to the rule
engine and to the changelog templates, which read type labels, emoji,
badge colours and ordering from it.

The defaults below can be overridden from the root pyproject.toml:

    [tool.lazy-changelog]
    tag-prefix = "v"
    repo-url = "https://github.com/acme/monorepo"
    scopes = ["api", "web"]

    [tool.lazy-changelog.description]
    max-length = 72

    [[tool.lazy-changelog.types]]
    type = "sec"
    label = "Security"
    category = "bugfixes"
    emoji = "🔒"
    badge-color = "B91C1C"
    breaking-allowed = true
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import PRCategory

DEFAULT_BADGE_COLOR = "6B7280"
DEFAULT_TAG_PREFIX = "v"

# Scopes that mark a conventional commit as a dependency update
DEPENDENCY_SCOPES = ("deps", "dependencies", "dep", "renovate", "dependabot")
DEPENDENCY_BOTS = ("renovate[bot]", "dependabot[bot]")


class CommitTypeDefinition(BaseModel):
    """One allowed commit type and how it is presented in changelogs."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str
    label: str
    description: str = ""
    category: PRCategory = "other"
    emoji: str = "📝"
    badge_color: str = Field(default=DEFAULT_BADGE_COLOR, alias="badge-color")
    breaking_allowed: bool = Field(default=False, alias="breaking-allowed")


class CategoryInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    emoji: str
    label: str


PR_CATEGORIES: dict[str, CategoryInfo] = {
    "features": CategoryInfo(emoji="🚀", label="Feature Releases"),
    "infrastructure": CategoryInfo(emoji="🛠️", label="Infrastructure & Tooling"),
    "bugfixes": CategoryInfo(emoji="🐛", label="Bug Fixes & Improvements"),
    "refactoring": CategoryInfo(emoji="🔄", label="Code Quality & Refactoring"),
    "documentation": CategoryInfo(emoji="📚", label="Documentation"),
    "dependencies": CategoryInfo(emoji="📦", label="Dependency Updates"),
    "other": CategoryInfo(emoji="🔄", label="Other Changes"),
}

DEFAULT_TYPES: tuple[CommitTypeDefinition, ...] = (
    CommitTypeDefinition(
        type="feat",
        label="Features",
        description="A new feature",
        category="features",
        emoji="🚀",
        badge_color="00D4AA",
        breaking_allowed=True,
    ),
    CommitTypeDefinition(
        type="fix",
        label="Bug Fixes",
        description="A bug fix",
        category="bugfixes",
        emoji="🐛",
        badge_color="EF4444",
        breaking_allowed=True,
    ),
    CommitTypeDefinition(
        type="docs",
        label="Documentation",
        description="Documentation only changes",
        category="documentation",
        emoji="📚",
        badge_color="646CFF",
    ),
    CommitTypeDefinition(
        type="style",
        label="Style",
        description="Changes that do not affect the meaning of the code",
        category="refactoring",
        emoji="🎨",
        badge_color="8B5CF6",
    ),
    CommitTypeDefinition(
        type="refactor",
        label="Refactoring",
        description="A code change that neither fixes a bug nor adds a feature",
        category="refactoring",
        emoji="🔧",
        badge_color="007ACC",
        breaking_allowed=True,
    ),
    CommitTypeDefinition(
        type="perf",
        label="Performance",
        description="A code change that improves performance",
        category="refactoring",
        emoji="⚡",
        badge_color="60a5fa",
        breaking_allowed=True,
    ),
    CommitTypeDefinition(
        type="test",
        label="Testing",
        description="Adding missing tests or correcting existing tests",
        category="infrastructure",
        emoji="🧪",
        badge_color="10B981",
    ),
    CommitTypeDefinition(
        type="ci",
        label="CI/CD",
        description="Changes to CI configuration files and scripts",
        category="infrastructure",
        emoji="👷",
        badge_color="2496ED",
    ),
    CommitTypeDefinition(
        type="build",
        label="Build",
        description="Changes that affect the build system or packaging",
        category="infrastructure",
        emoji="🏗️",
        badge_color="F59E0B",
    ),
    CommitTypeDefinition(
        type="chore",
        label="Chores",
        description="Other changes that don't modify src or test files",
        category="other",
        emoji="🔨",
        badge_color="495057",
    ),
    CommitTypeDefinition(
        type="revert",
        label="Revert",
        description="Reverts a previous commit",
        category="other",
        emoji="⏪",
        badge_color="DC2626",
        breaking_allowed=True,
    ),
    CommitTypeDefinition(
        type="merge",
        label="Merge",
        description="Merge commits (pull requests, branches)",
        category="other",
        emoji="🔀",
        badge_color="6B7280",
    ),
    CommitTypeDefinition(
        type="deps",
        label="Dependencies",
        description="Dependency updates and changes",
        category="dependencies",
        emoji="📦",
        badge_color="059669",
        breaking_allowed=True,
    ),
    CommitTypeDefinition(
        type="other",
        label="Other",
        description="Other types of changes",
        category="other",
        emoji="⚠️",
        badge_color="6B7280",
    ),
)


class CommitRuleConfig(BaseModel):
    """Rule and presentation settings shared by the rule engine and templates.

    Attributes:
        types: Allowed commit types, in changelog display order. An empty
               list disables the type check.
        scopes: Allowed scopes. An empty list disables the scope check.
        description_min_length: Minimum description length.
        description_max_length: Maximum description length.
        description_no_period: Reject descriptions ending with ".".
        description_no_type_prefix: Reject descriptions starting with a type.
        body_min_length: Minimum length of each body line.
        body_max_length: Maximum length of each body line.
        tag_prefix: Prefix between "{package}/" and the version in tags,
                    also used in changelog version headers.
        repo_url: Base URL for commit and pull request links.
    """

    model_config = ConfigDict(frozen=True)

    types: list[CommitTypeDefinition] = Field(default_factory=lambda: list(DEFAULT_TYPES))
    scopes: list[str] = Field(default_factory=list)
    description_min_length: int | None = 3
    description_max_length: int | None = 100
    description_no_period: bool = True
    description_no_type_prefix: bool = True
    body_min_length: int | None = 10
    body_max_length: int | None = 200
    tag_prefix: str = DEFAULT_TAG_PREFIX
    repo_url: str = ""

    @property
    def type_names(self) -> list[str]:
        return [t.type for t in self.types]

    @property
    def breaking_allowed_types(self) -> list[str]:
        return [t.type for t in self.types if t.breaking_allowed]

    def get_type(self, type_name: str) -> CommitTypeDefinition | None:
        for definition in self.types:
            if definition.type == type_name:
                return definition
        return None

    def badge_color(self, type_name: str) -> str:
        definition = self.get_type(type_name)
        return definition.badge_color if definition else DEFAULT_BADGE_COLOR

    def type_title(self, type_name: str) -> str:
        """Section title for a commit type, with a fallback for unknown types."""
        definition = self.get_type(type_name)
        if definition:
            return definition.label
        return f"📝 {type_name[:1].upper()}{type_name[1:]}"

    def type_order(self, extra: Iterable[str] = ()) -> list[str]:
        """Commit types in display order.

        Configured types come first in configuration order, followed by any
        unknown types from `extra` (alphabetically), with "deps" always last.
        """
        order = [t for t in self.type_names if t != "deps"]
        order += sorted({t for t in extra if t not in self.type_names and t != "deps"})
        order.append("deps")
        return order


def build_config(
    settings: Mapping[str, Any] | None = None,
    scopes: Iterable[str] = (),
    repo_url: str = "",
) -> CommitRuleConfig:
    """Build a CommitRuleConfig from a [tool.lazy-changelog] table.

    Args:
        settings: Contents of [tool.lazy-changelog], or None for defaults.
        scopes: Fallback scope list (usually the workspace package names),
                used when the settings don't list scopes explicitly.
        repo_url: Fallback repository URL.
    """
    settings = dict(settings or {})
    values: dict[str, Any] = {"scopes": list(settings.get("scopes", scopes))}

    if "types" in settings:
        values["types"] = [CommitTypeDefinition.model_validate(dict(t)) for t in settings["types"]]

    description = settings.get("description", {})
    if "min-length" in description:
        values["description_min_length"] = description["min-length"]
    if "max-length" in description:
        values["description_max_length"] = description["max-length"]
    if "no-period" in description:
        values["description_no_period"] = description["no-period"]
    if "no-type-prefix" in description:
        values["description_no_type_prefix"] = description["no-type-prefix"]

    body = settings.get("body", {})
    if "min-length" in body:
        values["body_min_length"] = body["min-length"]
    if "max-length" in body:
        values["body_max_length"] = body["max-length"]

    values["tag_prefix"] = settings.get("tag-prefix", DEFAULT_TAG_PREFIX)
    values["repo_url"] = str(settings.get("repo-url", repo_url)).rstrip("/")
    return CommitRuleConfig(**values)
