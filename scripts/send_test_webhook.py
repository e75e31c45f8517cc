#!/usr/bin/env python3
"""
Send a sample GitHub push payload to the EventListener.

Start the port-forward printed by 'apply_all.py --port-forward-test' first.

Usage:
    python3 scripts/send_test_webhook.py [--url http://localhost:8090] [--ref refs/heads/main]
"""

import sys
from pathlib import Path

# Allow running from a checkout without installing the package
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tekton_cd.cli import webhook_main  # noqa: E402


if __name__ == "__main__":
    sys.exit(webhook_main())
