"""Commit message validation.

CommitRules checks a parsed commit against a CommitRuleConfig and returns
every violation as a human readable string. Each rule only reports its
own first problem, so one bad commit can yield several messages (one per
rule) but never two for the same rule.
"""

from __future__ import annotations

from collections.abc import Callable

from .commits import parse_message
from .config import CommitRuleConfig
from .models import ParsedCommit

Rule = Callable[[ParsedCommit], "str | None"]


class CommitRules:
    """Configurable rule set for conventional commits.

    Args:
        config: Allowed types/scopes and length limits. Swapping the config
                changes the rules without code changes.
    """

    def __init__(self, config: CommitRuleConfig) -> None:
        self.config = config
        self.rules: list[tuple[str, Rule]] = [
            ("type", self.check_type),
            ("scopes", self.check_scopes),
            ("description", self.check_description),
            ("body", self.check_body),
            ("breaking", self.check_breaking),
        ]

    def validate(self, commit: ParsedCommit) -> list[str]:
        """Return all violations for a commit; an empty list means valid."""
        errors: list[str] = []
        for section, rule in self.rules:
            error = rule(commit)
            if error:
                errors.append(f"{section} | {error}")
        return errors

    def validate_message(self, text: str) -> list[str]:
        """Parse and validate a raw commit message (e.g. from a commit hook)."""
        if not text.strip():
            return ["type | commit message cannot be empty"]
        return self.validate(ParsedCommit(message=parse_message(text)))

    def check_type(self, commit: ParsedCommit) -> str | None:
        allowed = self.config.type_names
        if not allowed or commit.message.type in allowed:
            return None
        return f'invalid type: "{commit.message.type}". valid types:\n  => {", ".join(allowed)}'

    def check_scopes(self, commit: ParsedCommit) -> str | None:
        allowed = self.config.scopes
        if not commit.message.scopes or not allowed:
            return None
        invalid = [s for s in commit.message.scopes if s not in allowed]
        if invalid:
            return (
                f'invalid scope(s): "{", ".join(invalid)}". valid scopes:\n'
                f"  => {', '.join(allowed)}"
            )
        return None

    def check_description(self, commit: ParsedCommit) -> str | None:
        config = self.config
        desc = commit.message.description
        first_word = desc.split(" ")[0].lower() if desc else ""

        if config.description_min_length is not None and len(desc) < config.description_min_length:
            return f"should be at least {config.description_min_length} characters long"
        if config.description_max_length is not None and len(desc) > config.description_max_length:
            return f"should be max {config.description_max_length} chars, received: {len(desc)}"
        if config.description_no_period and desc.endswith("."):
            return "should not end with a period"
        if config.description_no_type_prefix and first_word in config.type_names:
            return (
                f'should not start with a type: "{first_word}". '
                "You're either duplicating the type or should use a different type."
            )
        return None

    def check_body(self, commit: ParsedCommit) -> str | None:
        lines = commit.message.body_lines
        if not lines:
            return None

        min_length = self.config.body_min_length
        max_length = self.config.body_max_length
        for line in lines:
            if min_length is not None and len(line) < min_length:
                return f"should be {min_length} characters or more, received: {len(line)}"
            if max_length is not None and len(line) > max_length:
                return f"should be {max_length} characters or less, received: {len(line)}"
        return None

    def check_breaking(self, commit: ParsedCommit) -> str | None:
        message = commit.message
        if not message.is_breaking:
            return None

        allowed = self.config.breaking_allowed_types
        if message.type not in allowed:
            return (
                "breaking change is not allowed for this type, allowed types:\n"
                f"  => {', '.join(allowed)}"
            )
        if not message.description:
            return "breaking change description cannot be empty"
        if len(message.description) < 10:
            return "breaking change description should be at least 10 characters long"
        return None
