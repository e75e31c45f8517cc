#!/usr/bin/env python3
"""
Apply the Tekton resources from .tekton/ in dependency order.

Waits for the EventListener, and optionally exposes it via an OpenShift
route and starts a manual PipelineRun.

Usage:
    python3 scripts/apply_all.py
    python3 scripts/apply_all.py --namespace my-ns --expose-eventlistener
    python3 scripts/apply_all.py --namespace my-ns --expose-eventlistener --run-pipelinerun
"""

import sys
from pathlib import Path

# Allow running from a checkout without installing the package
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tekton_cd.cli import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
