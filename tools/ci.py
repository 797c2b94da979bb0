#!/usr/bin/env python3
# Copyright 2026 AppHostGen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally."""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=apphostgen", "--cov-report=term-missing"]),
    ("Docs", ["uv", "run", "--extra", "docs", "sphinx-build", "-b", "html", "docs/sphinx", "build/docs"]),
    ("Build", ["uv", "build"]),
]


def main(only: list[str] | None = None) -> int:
    """Run the CI steps (all, or those whose names start with one of *only*) and report results."""
    selected = [(name, cmd) for name, cmd in STEPS if not only or any(name.lower().startswith(o) for o in only)]
    results: list[tuple[str, bool, float]] = []

    for name, cmd in selected:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_REPO_ROOT)
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("  Summary")
    failed = 0
    for name, passed, elapsed in results:
        status = chalk.green("PASS") if passed else chalk.red("FAIL")
        print(f"  {status}  {name} ({elapsed:.1f}s)")
        failed += not passed

    print()
    if failed:
        print(chalk.red(f"{failed} of {len(results)} step(s) failed."))
    return 1 if failed else 0


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


if __name__ == "__main__":
    sys.exit(main([arg.lower() for arg in sys.argv[1:]]))
