"""Check that the cluster client tools are installed."""

import shutil
import sys

REQUIRED = (
    ("kubectl", "Install with: brew install kubectl (macOS) or https://kubernetes.io/docs/tasks/tools/"),
)

OPTIONAL = (
    ("oc", "Needed for --expose-eventlistener: https://docs.openshift.com/container-platform/latest/cli_reference/openshift_cli/getting-started-cli.html"),
    ("tkn", "Needed for Tekton status output: https://tekton.dev/docs/cli/"),
)


def check_command(cmd, install_hint=None, which=shutil.which):
    """Check if a command exists."""
    if which(cmd):
        print(f"✅ {cmd} is installed")
        return True
    print(f"❌ {cmd} is not installed", file=sys.stderr)
    if install_hint:
        print(f"   {install_hint}", file=sys.stderr)
    return False


def check_prerequisites(which=shutil.which):
    """Report required and optional tools; True when every required one is present."""
    print("Checking prerequisites for applying the Tekton pipeline...")
    print()

    all_ok = True
    for cmd, hint in REQUIRED:
        all_ok &= check_command(cmd, hint, which=which)

    print()
    print("Optional tools:")
    for cmd, hint in OPTIONAL:
        check_command(cmd, hint, which=which)

    print()
    if all_ok:
        print("✅ All required prerequisites are installed!")
    else:
        print("❌ Some required prerequisites are missing. Please install them and try again.", file=sys.stderr)
    return all_ok


def main():
    return 0 if check_prerequisites() else 1
