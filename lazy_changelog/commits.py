"""Commit message parsing and git commit lookup.

parse_message() turns raw message text into a CommitMessage without any
I/O. read_commit() runs a single `git show` per hash and, for merge
commits, asks the PR resolver to recover the pull request behind it.
"""

from __future__ import annotations

import logging
import re

from .config import DEPENDENCY_BOTS, DEPENDENCY_SCOPES
from .errors import CommitLookupError, GitCommandError
from .models import CommitInfo, CommitMessage, ParsedCommit
from .pr import resolve_pr
from .shell import git

logger = logging.getLogger(__name__)

CONVENTIONAL_COMMIT_RE = re.compile(r"^([a-z]+)(\([a-zA-Z0-9@\-,\s/]+\))?(!)?:\s(.+)")
BREAKING_FOOTER_RE = re.compile(r"^BREAKING[ -]CHANGE:\s")

# hash, author, date, subject, raw body (subject + body)
SHOW_FORMAT = "%H%n%an%n%ad%n%s%n%B"


def is_merge_subject(subject: str) -> bool:
    return subject.startswith("Merge pull request") or subject.startswith("Merge branch")


def has_bot_signature(message: str) -> bool:
    return any(bot in message for bot in DEPENDENCY_BOTS)


def parse_message(message: str) -> CommitMessage:
    """Parse a raw commit message into a CommitMessage.

    The first line is the subject; remaining non-blank lines become the
    body. Subjects matching `type(scope)!: description` are split into
    their parts. Anything else is classified as "merge", "deps" or
    "other" and keeps the whole subject as its description.

    Never raises: every string produces a CommitMessage.

    Examples:
        "feat(core,ui)!: drop v1 api" → type="feat", scopes=["core", "ui"],
                                        is_breaking=True
        "Merge pull request #12 from a/b" → type="merge", is_merge=True
        "bump lodash" → type="other"
    """
    lines = message.split("\n")
    subject = lines[0].strip()
    body_lines = [line for line in lines[1:] if line.strip()]

    match = CONVENTIONAL_COMMIT_RE.match(subject)
    if not match:
        if is_merge_subject(subject):
            fallback = "merge"
        elif has_bot_signature(message):
            fallback = "deps"
        else:
            fallback = "other"
        return CommitMessage(
            type=fallback,
            scopes=[],
            description=subject,
            body_lines=body_lines,
            is_breaking=False,
            is_merge=fallback == "merge",
            is_dependency=fallback == "deps",
        )

    commit_type, scope, bang, description = match.groups()
    scopes = [s.strip() for s in scope.strip("()").split(",") if s.strip()] if scope else []
    is_breaking = bang == "!" or any(BREAKING_FOOTER_RE.match(line) for line in body_lines)

    return CommitMessage(
        type=commit_type,
        scopes=scopes,
        description=description.strip(),
        body_lines=body_lines,
        is_breaking=is_breaking,
        is_merge=is_merge_subject(subject),
        is_dependency=any(s in DEPENDENCY_SCOPES for s in scopes) or has_bot_signature(message),
    )


def read_commit(commit_hash: str) -> ParsedCommit:
    """Read a commit from git and parse it.

    Issues exactly one `git show` for the commit itself. Merge commits
    additionally go through the PR resolver, which reads the commits the
    merge brought in.

    Args:
        commit_hash: Any revision git can resolve to a commit.

    Returns:
        The parsed commit, with `pr` set when a PR number was found.

    Raises:
        CommitLookupError: If git can't resolve the hash or the commit has
                           no subject line.
    """
    try:
        output = git(
            "show",
            "--no-patch",
            "--date=iso-strict",
            f"--format={SHOW_FORMAT}",
            commit_hash,
        )
    except GitCommandError as exc:
        raise CommitLookupError(commit_hash, exc.stderr or "not found") from exc

    lines = output.split("\n")
    if len(lines) < 4 or not lines[3].strip():
        raise CommitLookupError(commit_hash, "no subject found")

    full_hash, author, date, subject, *raw_body = lines
    # %B starts with the subject paragraph, which %s folds into one line
    blanks = [i for i, line in enumerate(raw_body) if not line.strip()]
    raw_body = raw_body[blanks[0] + 1 :] if blanks else []

    message = parse_message("\n".join([subject, *raw_body]))
    info = CommitInfo(hash=full_hash.strip(), author=author or None, date=date or None)
    pr = resolve_pr(full_hash.strip(), message, read_commit) if message.is_merge else None
    return ParsedCommit(message=message, info=info, pr=pr)
