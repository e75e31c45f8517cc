#!/usr/bin/env python3
"""
Show the Tekton resources in a namespace.

Usage:
    python3 scripts/status.py --namespace my-ns
"""

import sys
from pathlib import Path

# Allow running from a checkout without installing the package
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tekton_cd.cli import status_main  # noqa: E402


if __name__ == "__main__":
    sys.exit(status_main())
