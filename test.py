#!/usr/bin/env python3

# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
IAM Provisioning Test Runner

Runs the unit and integration test suites.

Usage:
    python test.py
    python test.py --unit-only
"""

import argparse
import subprocess
import sys


class Colors:
    """ANSI color codes for terminal output."""
    OKBLUE = '\033[94m'
    OKGREEN = '\033[92m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'


def log_info(msg):
    print(f"{Colors.OKBLUE}ℹ {msg}{Colors.ENDC}")


def log_success(msg):
    print(f"{Colors.OKGREEN}✓ {msg}{Colors.ENDC}")


def log_error(msg):
    print(f"{Colors.FAIL}✗ {msg}{Colors.ENDC}")


def run_command(cmd):
    """Run shell command."""
    log_info(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=False)
    return result.returncode == 0


def check_python_version():
    """Check if Python 3.12+ is available."""
    version_info = sys.version_info

    if version_info[0] < 3 or (version_info[0] == 3 and version_info[1] < 12):
        log_error("Python 3.12+ is required")
        log_info(f"Current version: Python {version_info[0]}.{version_info[1]}.{version_info[2]}")
        sys.exit(1)

    log_success(f"Found Python {version_info[0]}.{version_info[1]}.{version_info[2]}")
    return True


def main():
    """Main test runner."""
    parser = argparse.ArgumentParser(description="Run the IAM provisioning test suites")
    parser.add_argument("--unit-only", action="store_true", help="Skip moto integration tests")
    args = parser.parse_args()

    print(f"\n{'=' * 60}")
    print("IAM Provisioning Test Runner")
    print(f"{'=' * 60}\n")

    check_python_version()

    suites = ["tests/unit"]
    if not args.unit_only:
        suites.append("tests/integration")

    for suite in suites:
        log_info(f"Running {suite}...")
        if not run_command([sys.executable, "-m", "pytest", suite, "-q"]):
            log_error(f"Tests failed in {suite}")
            sys.exit(1)
        log_success(f"{suite} passed\n")

    print(f"\n{'=' * 60}")
    log_success("All tests passed!")
    print(f"{'=' * 60}\n")


if __name__ == "__main__":
    main()
