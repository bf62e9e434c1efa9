"""Pull request recovery from merge commits.

Given a merge commit, works out which PR it closed, which commits the PR
brought in (regular merge vs. squash merge), the source branch and a
heuristic category for the changelog.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from .errors import ChangelogError
from .models import CommitInfo, CommitMessage, ParsedCommit, PRCategory, PRInfo, PRStats
from .shell import git_lines

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_NAME = "main"
SQUASH_PREFIX = "Squashed changes from PR"

# Tried in order; first match wins
PR_NUMBER_PATTERNS = (
    re.compile(r"Merge pull request #(\d+)"),
    re.compile(r"Merge PR #(\d+)"),
    re.compile(r"Merge.*#(\d+)"),
    re.compile(r"#(\d+)"),
)

# Tie-break order when two categories reach the same score
CATEGORY_PRIORITY: tuple[PRCategory, ...] = (
    "features",
    "bugfixes",
    "dependencies",
    "infrastructure",
    "documentation",
    "refactoring",
)

CommitReader = Callable[[str], ParsedCommit]


def extract_pr_number(message: CommitMessage) -> str | None:
    """Extract the PR number from a merge commit description.

    Examples:
        "Merge pull request #123 from user/branch" → "123"
        "Merge branch 'feature' into main #45" → "45"
        "Merge branch 'feature'" → None
    """
    for pattern in PR_NUMBER_PATTERNS:
        match = pattern.search(message.description)
        if match:
            return match.group(1)
    return None


def list_pr_commit_hashes(merge_hash: str) -> list[str]:
    """List the commits a merge brought in (`merge^..merge^2`).

    Returns an empty list when git can't walk the range, e.g. in shallow
    clones or for commits without a second parent.
    """
    return git_lines("log", "--pretty=format:%H", f"{merge_hash}^..{merge_hash}^2", check=False)


def _stub_commit(commit_hash: str) -> ParsedCommit:
    return ParsedCommit(
        message=CommitMessage(type="other", description="Failed to parse commit"),
        info=CommitInfo(hash=commit_hash.strip()),
    )


def get_pr_commits(merge_hash: str, read: CommitReader) -> list[ParsedCommit]:
    """Read the commits enclosed by a merge.

    More than one hash means a regular merge: every commit is read on its
    own and a commit that fails to parse becomes a stub instead of failing
    the PR. Exactly one hash is treated as a squash merge and gets a
    synthetic description so templates can tell it apart.

    Args:
        merge_hash: Hash of the merge commit.
        read: Function reading a single commit by hash.
    """
    hashes = list_pr_commit_hashes(merge_hash)

    if len(hashes) > 1:
        commits: list[ParsedCommit] = []
        for commit_hash in hashes:
            try:
                commits.append(read(commit_hash))
            except ChangelogError as exc:
                logger.warning("Failed to parse PR commit %s: %s", commit_hash, exc)
                commits.append(_stub_commit(commit_hash))
        return commits

    if len(hashes) == 1:
        try:
            squashed = read(hashes[0])
        except ChangelogError as exc:
            logger.warning("Failed to parse squashed commit %s: %s", hashes[0], exc)
            return []
        message = squashed.message.model_copy(
            update={"description": f"{SQUASH_PREFIX} ({squashed.message.description})"}
        )
        return [squashed.model_copy(update={"message": message})]

    return []


def _mentions(text: str, words: tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def categorize_pr(commits: list[ParsedCommit], merge_message: CommitMessage) -> PRCategory:
    """Assign a PR category by scoring the types of its commits.

    Dependency bot merges short-circuit to "dependencies". Otherwise each
    commit adds points to one category and the highest score wins, ties
    going to the category listed first in CATEGORY_PRIORITY. A PR where
    nothing scored is "other".
    """
    description = merge_message.description
    if (
        "renovate" in description
        or "dependabot" in description
        or any("dependency" in line.lower() for line in merge_message.body_lines)
    ):
        return "dependencies"

    scores: dict[PRCategory, int] = {category: 0 for category in CATEGORY_PRIORITY}

    for commit in commits:
        commit_type = commit.message.type
        text = commit.message.description
        if commit_type == "feat":
            scores["features"] += 3
        elif commit_type == "fix":
            scores["bugfixes"] += 2
        elif commit_type in ("deps", "chore"):
            if _mentions(text, ("dep", "update", "upgrade")):
                scores["dependencies"] += 5
            elif _mentions(text, ("ci", "build", "workflow")):
                scores["infrastructure"] += 2
        elif commit_type == "docs":
            scores["documentation"] += 2
        elif commit_type in ("refactor", "style", "perf"):
            scores["refactoring"] += 2
        elif commit_type in ("ci", "build"):
            scores["infrastructure"] += 3

    best = max(scores.values())
    if best == 0:
        return "other"
    return next(category for category in CATEGORY_PRIORITY if scores[category] == best)


def extract_branch_name(message: CommitMessage) -> str:
    """Extract the source branch of a merge from its "from ..." marker.

    The user or fork part before the first ":" (or, failing that, the
    first "/") is dropped.

    Examples:
        "Merge pull request #1 from alice:feature/login" → "feature/login"
        "Merge pull request #2 from alice/fix-typo" → "fix-typo"
        "Merge branch 'dev'" → "main"
    """
    if not message.is_merge:
        return DEFAULT_BRANCH_NAME

    text = "\n".join([message.description, *message.body_lines])
    if "from " not in text:
        return DEFAULT_BRANCH_NAME

    after_from = text[text.index("from ") + len("from ") :]
    first_line = after_from.split("\n")[0].strip()

    for separator in (":", "/"):
        if separator in first_line:
            branch = first_line.split(separator, 1)[1]
            return branch or DEFAULT_BRANCH_NAME

    return first_line or DEFAULT_BRANCH_NAME


def resolve_pr(merge_hash: str, message: CommitMessage, read: CommitReader) -> PRInfo | None:
    """Build PRInfo for a merge commit.

    Args:
        merge_hash: Hash of the merge commit.
        message: The merge commit's parsed message.
        read: Function reading a single commit by hash, used for the
              enclosed commits.

    Returns:
        PRInfo, or None when no PR number can be extracted (the merge is
        then treated as a direct commit).
    """
    pr_number = extract_pr_number(message)
    if not pr_number:
        return None

    commits = get_pr_commits(merge_hash, read)
    return PRInfo(
        pr_number=pr_number,
        pr_category=categorize_pr(commits, message),
        pr_stats=PRStats(commit_count=len(commits)),
        pr_commits=commits,
        pr_branch_name=extract_branch_name(message),
    )
