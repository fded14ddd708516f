#!/usr/bin/env python3
"""Quick verification script to check if Rollover is set up correctly."""

import os
import sys


def check_imports():
    """Check if all imports work."""
    print("Checking imports...")
    try:
        from rollover import reconcile, resolve_config
        from rollover.github import GitHubClient
        from rollover.trace import JsonlTraceStore, load_events
        print("✓ All imports successful")
        return True
    except ImportError as e:
        print(f"✗ Import error: {e}")
        print("  Run: pip install -e .")
        return False


def check_token():
    """Check that a GitHub token is available."""
    print("\nChecking GitHub token...")
    token = os.getenv("GITHUB_TOKEN") or os.getenv("INPUT_GITHUB-TOKEN")
    if token:
        print(f"✓ GitHub token is set (starts with: {token[:7]}...)")
        return True
    print("✗ GITHUB_TOKEN not set")
    print("  Set it: export GITHUB_TOKEN='ghp_your-token'")
    return False


def check_cli():
    """Check if CLI is accessible."""
    print("\nChecking CLI...")
    try:
        from rollover.cli import main
        print("✓ CLI module accessible")
        return True
    except ImportError as e:
        print(f"✗ CLI error: {e}")
        return False


def main():
    """Run all checks."""
    print("=" * 50)
    print("Rollover Setup Verification")
    print("=" * 50)

    all_ok = True
    all_ok &= check_imports()
    all_ok &= check_token()
    all_ok &= check_cli()

    print("\n" + "=" * 50)
    if all_ok:
        print("✓ Setup looks good! You can run:")
        print("  rollover --help")
        print("  rollover plan --repo owner/repo --milestone 5 --issues-count 50")
    else:
        print("✗ Some issues found. Please fix them above.")
        sys.exit(1)
    print("=" * 50)


if __name__ == "__main__":
    main()
