# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the bromasync command-line interface."""

import argparse
import sys
from pathlib import Path

from yachalk import chalk

from bromasync.database.memory import InMemoryDatabase, load_database, save_database
from bromasync.database.protocol import DatabaseError
from bromasync.parser.lexer import LexerError
from bromasync.parser.parser import ParseError, parse
from bromasync.sync.conventions import Platform
from bromasync.sync.decisions import Conflict, Decision, DecisionProvider, FixedDecisionProvider
from bromasync.sync.engine import sync_files
from bromasync.sync.report import SyncAborted, SyncError, SyncSummary
from bromasync.workspace.config import WorkspaceConfig, WorkspaceError, load_workspace_config
from bromasync.workspace.versions import discover_versions, resolve_target_files, select_version

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the bromasync CLI."""
    parser = argparse.ArgumentParser(
        prog="bromasync",
        description="bromasync - synchronize Broma bindings with a program database",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Parse the binding files of a version",
        description="Parse the binding files of a version and report what they declare.",
    )
    _add_workspace_arguments(check_parser)

    # sync subcommand
    sync_parser = subparsers.add_parser(
        "sync",
        help="Import addresses and signatures into a program database",
        description=(
            "Create missing functions at their declared addresses and update their "
            "signatures in a JSON program database. The database is created if it "
            "does not exist."
        ),
    )
    sync_parser.add_argument("database", help="Path to the JSON program database")
    _add_workspace_arguments(sync_parser)
    sync_parser.add_argument(
        "--platform",
        default=None,
        help="Target platform: win or mac (default: from workspace config, else win)",
    )
    sync_parser.add_argument(
        "--on-conflict",
        choices=sorted(_CONFLICT_POLICIES),
        default="ask",
        help="How to settle conflicts with user-defined signatures (default: ask)",
    )
    sync_parser.add_argument(
        "--image-base",
        type=lambda value: int(value, 0),
        default=0x400000,
        help="Image base used when creating a new database (default: 0x400000)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################

_CONFLICT_POLICIES: dict[str, Decision | None] = {
    "ask": None,
    "incoming": Decision.USE_INCOMING,
    "existing": Decision.KEEP_EXISTING,
    "abort": Decision.ABORT,
}

_PROMPT_ANSWERS: dict[str, Decision] = {
    "b": Decision.USE_INCOMING,
    "d": Decision.KEEP_EXISTING,
    "c": Decision.ABORT,
}


class _PromptDecisionProvider:
    """Asks the user on the terminal how to settle each conflict."""

    def resolve(self, conflict: Conflict) -> Decision:
        print(chalk.yellow(conflict.describe()))
        while True:
            try:
                answer = input("Use Broma's value [b], keep the database's [d], or cancel [c]? ")
            except EOFError:
                return Decision.ABORT
            decision = _PROMPT_ANSWERS.get(answer.strip().lower())
            if decision is not None:
                return decision
            print("Please answer b, d or c.")


def _add_workspace_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Workspace directory (default: current directory)",
    )
    subparser.add_argument(
        "--version",
        default=None,
        help="Binding version to use (default: from workspace config, else the newest)",
    )
    subparser.add_argument(
        "--file",
        action="append",
        default=None,
        help="Binding file to use; may be repeated (default: the configured target files)",
    )


def _error(message: str) -> None:
    print(chalk.red(f"Error: {message}"), file=sys.stderr)


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "sync":
        return _cmd_sync(args)
    return 0


def _load_targets(args: argparse.Namespace) -> tuple[WorkspaceConfig, str, list[Path]]:
    """Resolve configuration, version and binding files from the arguments.

    Raises:
        WorkspaceError: If the workspace is missing or inconsistent.
    """
    directory = Path(args.directory).resolve()
    if not directory.is_dir():
        raise WorkspaceError(f"directory '{directory}' does not exist.")
    config = load_workspace_config(directory)
    bindings_dir = directory / config.bindings_directory
    version = select_version(discover_versions(bindings_dir), args.version or config.version)
    files = resolve_target_files(bindings_dir, version, args.file or config.target_files)
    return config, version, files


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    try:
        _, version, files = _load_targets(args)
    except WorkspaceError as exc:
        _error(str(exc))
        return 1

    print(f"Checking {len(files)} binding file(s) for version {version}...")
    has_errors = False
    for path in files:
        try:
            classes = parse(path.read_text(encoding="utf-8"))
        except (OSError, LexerError, ParseError) as exc:
            _error(f"{path.name}: {exc}")
            has_errors = True
            continue
        functions = sum(len(cls.functions) for cls in classes)
        print(f"  {path.name}: {len(classes)} class(es), {functions} function(s)")

    if has_errors:
        return 1
    print("No issues found.")
    return 0


def _cmd_sync(args: argparse.Namespace) -> int:
    """Handle the sync subcommand."""
    try:
        config, version, files = _load_targets(args)
        platform = Platform.parse(args.platform or config.platform)
    except (WorkspaceError, SyncError) as exc:
        _error(str(exc))
        return 1

    database_path = Path(args.database)
    if database_path.exists():
        try:
            database = load_database(database_path)
        except DatabaseError as exc:
            _error(str(exc))
            return 1
    else:
        print(f"Creating new database '{database_path}'.")
        database = InMemoryDatabase(image_base=args.image_base)

    policy = _CONFLICT_POLICIES[args.on_conflict]
    decisions: DecisionProvider = _PromptDecisionProvider() if policy is None else FixedDecisionProvider(policy)

    print(f"Syncing {len(files)} binding file(s) for version {version} on {platform.name.lower()}...")
    try:
        summary = sync_files(files, platform=platform, database=database, decisions=decisions)
    except SyncAborted as exc:
        _report(exc.summary)
        save_database(database, database_path)
        _error(f"{exc}. Changes made before the abort were kept.")
        return 1
    except SyncError as exc:
        _error(str(exc))
        return 1

    _report(summary)
    save_database(database, database_path)
    return 0


def _report(summary: SyncSummary) -> None:
    for name in summary.added:
        print(f"Added {name}")
    for name in summary.updated:
        print(f"Updated {name}")
    for warning in summary.warnings:
        print(chalk.yellow(f"Warning: {warning.message}"))
    print(
        chalk.green(
            f"Added {summary.added_count} functions & updated {summary.updated_count} functions from Broma"
        )
    )
