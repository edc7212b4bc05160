#!/usr/bin/env python3
# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the bromasync CI checks locally: format, lint, tests, CLI smoke run and build."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=bromasync", "--cov-report=term-missing"]),
    ("CLI smoke run", ["uv", "run", "bromasync", "--help"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a summary table."""
    parser = argparse.ArgumentParser(description="Run bromasync CI checks")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    parser.add_argument(
        "--only",
        action="append",
        choices=[name for name, _ in STEPS],
        help="Run only the named step; may be repeated",
    )
    args = parser.parse_args()

    steps = [(name, cmd) for name, cmd in STEPS if not args.only or name in args.only]
    results: list[tuple[str, bool, float]] = []
    for name, cmd in steps:
        passed, elapsed = _run_step(name, cmd)
        results.append((name, passed, elapsed))
        if not passed and args.fail_fast:
            break

    _print_summary(results, skipped=len(steps) - len(results))
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_RULE = "=" * 60


def _run_step(name: str, cmd: list[str]) -> tuple[bool, float]:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue(name))
    print(chalk.blue(_RULE))
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=Path(__file__).parent.parent)
    return proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[str, bool, float]], skipped: int) -> None:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(_RULE))
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        print(color(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    if skipped:
        print(chalk.yellow(f"  {skipped} step(s) skipped"))
    print()


if __name__ == "__main__":
    sys.exit(main())
