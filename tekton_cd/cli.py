"""Command line entry points."""

import argparse
import os
import sys

import requests

from . import orchestrator
from .config import parse_options
from .errors import TektonApplyError
from .kube import Environment, KubeClient, detect_tools
from .output import log_error
from .webhook import DEFAULT_REF, DEFAULT_REPO_URL, LOCAL_PORT, send_test_payload


def main(argv=None, client=None):
    """Apply everything; returns the process exit code."""
    options = parse_options(argv)
    try:
        if client is None:
            client = KubeClient(detect_tools())
        orchestrator.run(options, client)
    except TektonApplyError as e:
        log_error(str(e))
        return 1
    return 0


def status_main(argv=None, client=None):
    """Print the summary for a namespace without applying anything."""
    parser = argparse.ArgumentParser(description="Show Tekton resources in a namespace")
    parser.add_argument(
        "--namespace",
        default=os.getenv("SN_OC_NS", "tekton-cd"),
        help="Namespace to inspect (default: tekton-cd or SN_OC_NS env var)"
    )
    args = parser.parse_args(argv)
    try:
        if client is None:
            client = KubeClient(detect_tools())
    except TektonApplyError as e:
        log_error(str(e))
        return 1
    orchestrator.summarize(client, Environment(args.namespace))
    return 0


def webhook_main(argv=None):
    """POST a sample GitHub push payload to a (port-forwarded) EventListener."""
    parser = argparse.ArgumentParser(description="Send a test payload to the EventListener")
    parser.add_argument(
        "--url",
        default=os.getenv("EL_URL", f"http://localhost:{LOCAL_PORT}"),
        help=f"EventListener URL (default: http://localhost:{LOCAL_PORT} or EL_URL env var)"
    )
    parser.add_argument("--repo-url", default=DEFAULT_REPO_URL, help="Repository URL in the payload")
    parser.add_argument("--ref", default=DEFAULT_REF, help=f"Git ref in the payload (default: {DEFAULT_REF})")
    args = parser.parse_args(argv)

    try:
        send_test_payload(args.url, repo_url=args.repo_url, ref=args.ref)
    except requests.RequestException as e:
        log_error(f"Failed to send test payload: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
