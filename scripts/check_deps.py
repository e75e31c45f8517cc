#!/usr/bin/env python3
"""
Check prerequisites for applying the Tekton pipeline.

Verifies that kubectl is installed, and reports whether the optional oc and
tkn CLIs are available.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tekton_cd.prereqs import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
