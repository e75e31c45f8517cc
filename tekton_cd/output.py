"""Console output helpers shared by the CLI and the scripts."""

import sys

RULE = "=" * 60


def log_info(message):
    print(f"ℹ️  {message}")


def log_success(message):
    print(f"✅ {message}")


def log_warn(message):
    print(f"⚠️  {message}")


def log_error(message):
    print(f"❌ {message}", file=sys.stderr)


def banner(title):
    """Print a section banner."""
    print()
    print(RULE)
    print(title)
    print(RULE)
