"""CLI entry point for lazy-changelog."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from importlib.metadata import version as pkg_version
from pathlib import Path

from lazy_changelog.changelog import PackageChangelog
from lazy_changelog.errors import ChangelogError
from lazy_changelog.packages import (
    discover_packages,
    get_package,
    load_config,
    write_changelog,
    write_version,
)
from lazy_changelog.rules import CommitRules
from lazy_changelog.shell import fatal, step
from lazy_changelog.tags import latest_package_tag
from lazy_changelog.templates import TEMPLATES, get_template

__version__ = pkg_version("lazy-changelog")


def _write_output(output_path: str, name: str, value: str) -> None:
    with open(output_path, "a") as fh:
        fh.write(f"{name}={value}\n")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def prepare_package(name: str, args: argparse.Namespace) -> bool:
    """Compute the version and changelog for one package.

    Returns:
        True if the package has a release to deploy (bumped or already
        synced to its target version).

    Raises:
        ChangelogError: On any fatal error for this package.
    """
    root = Path.cwd()
    package = get_package(name, root)
    config = load_config(root)
    template = get_template(args.template, package.name, config)

    changelog = PackageChangelog(
        package, template, config, version_mode=args.version_mode, root=root
    )
    from_ref = args.from_ref or latest_package_tag(package.name, config.tag_prefix, merged=args.to_ref)
    changelog.set_range(from_ref, args.to_ref)

    data = changelog.get_version_data()
    commit_count = changelog.get_commit_count()
    print(f"  Range:   {from_ref or '<first commit>'}..{args.to_ref}")
    print(f"  Current: {data.current_version}")
    print(f"  Target:  {data.target_version}")
    print(f"  Bump:    {data.bump_type}")
    print(f"  Commits: {commit_count}")
    print(f"  Reason:  {data.reason}")

    if commit_count == 0:
        print("  No commits found in the specified range")
        return False

    content = changelog.generate_merged_changelog()
    if args.dry_run:
        print(f"\n{content}")
        return data.should_bump or data.bump_type == "synced"

    if data.should_bump:
        write_version(package, data.target_version, root)
        print(f"  ✓ {package.pyproject_path}: {data.current_version} → {data.target_version}")
    path = write_changelog(package, content, root)
    print(f"  ✓ Wrote {path.relative_to(root)}")
    return data.should_bump or data.bump_type == "synced"


def cmd_prepare(args: argparse.Namespace) -> None:
    """Prepare version bumps and changelogs for one or more packages."""
    names = args.package or list(discover_packages(Path.cwd()))
    to_deploy: list[str] = []
    failed: list[str] = []

    for name in names:
        step(f"Preparing {name}")
        try:
            if prepare_package(name, args):
                to_deploy.append(name)
        except ChangelogError as exc:
            # One broken package must not stop the others
            print(f"  ERROR: {exc}", file=sys.stderr)
            failed.append(name)

    if args.github_output:
        _write_output(args.github_output, "packages-to-deploy", json.dumps(to_deploy))

    if failed:
        fatal(f"Failed to prepare: {', '.join(failed)}")
    print(f"\n{'=' * 60}\nDone!\n{'=' * 60}")


def cmd_check(args: argparse.Namespace) -> None:
    """Validate a commit message against the configured rules."""
    if args.message_file:
        raw = Path(args.message_file).read_text()
        # Drop git's comment lines from COMMIT_EDITMSG
        message = "\n".join(
            line for line in raw.rstrip().splitlines() if not line.strip().startswith("#")
        )
    else:
        message = args.message or ""

    errors = CommitRules(load_config(Path.cwd())).validate_message(message.rstrip())
    if errors:
        fatal("Commit message validation failed:\n" + "\n".join(f"  • {e}" for e in errors))
    print("✓ Commit message is valid")


def cli(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="lazy-changelog",
        description="Semantic versions and changelogs from git history, per workspace package.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging (git calls)."
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # prepare subcommand
    prepare_parser = subparsers.add_parser(
        "prepare", help="Compute version bumps and write changelogs."
    )
    prepare_parser.add_argument(
        "-p",
        "--package",
        action="append",
        help="Package to process (repeatable). Default: all workspace packages.",
    )
    prepare_parser.add_argument(
        "-f",
        "--from",
        dest="from_ref",
        default=None,
        help="Start commit/tag (exclusive). Default: the package's last tag.",
    )
    prepare_parser.add_argument(
        "-t",
        "--to",
        dest="to_ref",
        default="HEAD",
        help="End commit/tag (inclusive). (default: %(default)s)",
    )
    prepare_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the changelog instead of writing files.",
    )
    prepare_parser.add_argument(
        "--template",
        choices=sorted(TEMPLATES),
        default="default",
        help="Changelog template. (default: %(default)s)",
    )
    prepare_parser.add_argument(
        "--no-version-mode",
        dest="version_mode",
        action="store_false",
        help="File unreleased commits under [Unreleased] instead of the target version.",
    )
    prepare_parser.add_argument(
        "--github-output",
        default=os.environ.get("GITHUB_OUTPUT"),
        help="Path to GitHub step output file. (default: $GITHUB_OUTPUT)",
    )
    prepare_parser.set_defaults(func=cmd_prepare)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check", help="Validate a commit message."
    )
    source = check_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-m", "--message", help="Commit message to validate.")
    source.add_argument(
        "-F", "--message-file", help="File holding the message (e.g. .git/COMMIT_EDITMSG)."
    )
    check_parser.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    args.func(args)
