"""Changelog templates."""

from __future__ import annotations

from ..config import CommitRuleConfig
from .base import ChangelogTemplate
from .compact import CompactTemplate
from .default import DefaultTemplate

TEMPLATES = {
    "default": DefaultTemplate,
    "compact": CompactTemplate,
}


def get_template(name: str, package: str, config: CommitRuleConfig) -> ChangelogTemplate:
    """Instantiate a template by name ("default" or "compact")."""
    try:
        template_cls = TEMPLATES[name]
    except KeyError:
        raise ValueError(f"Unknown template {name!r}. Available: {', '.join(TEMPLATES)}") from None
    return template_cls(package, config)


__all__ = ["ChangelogTemplate", "CompactTemplate", "DefaultTemplate", "TEMPLATES", "get_template"]
