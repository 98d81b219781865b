#!/usr/bin/env python3
"""
Development validation script.

Runs formatting, linting, type checking and tests, then checks that
knife-show can still parse the sample knife.rb.

Examples:
    python scripts/validate.py
    python scripts/validate.py --skip mypy --skip format
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

PACKAGES = ["config", "helpers", "utils", "tools"]
SAMPLE_KNIFE_RB = Path("tests") / "support" / "knife.rb"


def build_checks(skip: set[str] | None = None) -> list[tuple[str, list[str], str]]:
    """Return ``(name, command, description)`` for every check not in ``skip``."""
    python = sys.executable
    checks = [
        (
            "format",
            [python, "-m", "ruff", "format", "--check", *PACKAGES, "tests"],
            "Code formatting (ruff format)",
        ),
        ("lint", [python, "-m", "ruff", "check", *PACKAGES, "tests"], "Linting (ruff check)"),
        ("mypy", [python, "-m", "mypy", *PACKAGES], "Type checking (mypy)"),
        ("tests", [python, "-m", "pytest", "-q"], "Tests (pytest)"),
        (
            "smoke",
            [python, "-m", "tools.knife_show", "--config", str(SAMPLE_KNIFE_RB)],
            "Sample knife.rb parses (knife-show)",
        ),
    ]
    return [check for check in checks if check[0] not in (skip or set())]


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if successful."""
    print(f"🔍 {description}...")
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed:")
        if e.stdout:
            print(e.stdout)
        if e.stderr:
            print(e.stderr)
        return False
    print(f"✅ {description} passed")
    return True


def main(argv: list[str] | None = None) -> int:
    """Run all validation checks."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        choices=["format", "lint", "mypy", "tests", "smoke"],
        help="Check to skip; may be repeated",
    )
    args = parser.parse_args(argv)

    os.chdir(Path(__file__).parent.parent)

    failed = [
        description
        for _, cmd, description in build_checks(set(args.skip))
        if not run_command(cmd, description)
    ]

    if failed:
        print(f"\n❌ {len(failed)} check(s) failed:")
        for check in failed:
            print(f"  - {check}")
        return 1

    print("\n🎉 All checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
