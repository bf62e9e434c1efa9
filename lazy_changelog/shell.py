"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running git, plus
output formatting helpers used by the CLI.
"""

from __future__ import annotations

import logging
import subprocess
import sys

from .errors import GitCommandError

logger = logging.getLogger(__name__)


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "log", "--format=%H").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).

    Returns:
        Stripped stdout from the git command. Empty when check is False
        and the command failed.

    Raises:
        GitCommandError: If check is True and git exits non-zero.
    """
    logger.debug("git %s", " ".join(args))
    result = subprocess.run(["git", *args], capture_output=True, text=True)
    if result.returncode != 0:
        if check:
            raise GitCommandError(args, result.returncode, result.stderr.strip())
        return ""
    return result.stdout.strip()


def git_lines(*args: str, check: bool = True) -> list[str]:
    """Run a git command and return its non-empty output lines."""
    return [line.strip() for line in git(*args, check=check).splitlines() if line.strip()]


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate packages and phases in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the run.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
