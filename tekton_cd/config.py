"""
Options for the apply orchestrator.

Defaults come from the environment so the tool can be driven from CI or a
lab shell without flags:

    SN_OC_NS          target namespace (default: tekton-cd)
    TEKTON_DIR        directory holding the manifests (default: .tekton)
    EL_READY_TIMEOUT  seconds to wait for the EventListener pod (default: 60)
"""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_NAMESPACE = "tekton-cd"
DEFAULT_TEKTON_DIR = ".tekton"
DEFAULT_READY_TIMEOUT = 60
POLL_INTERVAL = 3

# Producers before consumers: tasks, then storage, then the pipeline that
# mounts the claim, then the triggers that reference the pipeline.
FILE_ORDER = (
    "clustertasks.yaml",
    "tasks.yml",
    "storageclass-skills-class-learner.yaml",
    "pvc.yaml",
    "pipeline-output.yaml",
    "triggerbinding.yaml",
    "triggertemplate.yaml",
    "eventlistener.yaml",
)

PIPELINERUN_FILE = "pipelinerun.yaml"


@dataclass(frozen=True)
class ApplyOptions:
    namespace: str = DEFAULT_NAMESPACE
    tekton_dir: Path = Path(DEFAULT_TEKTON_DIR)
    expose_eventlistener: bool = False
    run_pipelinerun: bool = False
    port_forward_test: bool = False
    timeout: int = DEFAULT_READY_TIMEOUT

    @property
    def ordered_files(self):
        return [self.tekton_dir / name for name in FILE_ORDER]

    @property
    def pipelinerun_file(self):
        return self.tekton_dir / PIPELINERUN_FILE


def _positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number of seconds, got {value}")
    return number


def build_parser(environ=None):
    env = os.environ if environ is None else environ
    default_ns = env.get("SN_OC_NS", DEFAULT_NAMESPACE)
    default_dir = env.get("TEKTON_DIR", DEFAULT_TEKTON_DIR)
    # Kept as a string so argparse runs it through _positive_int like --timeout
    default_timeout = env.get("EL_READY_TIMEOUT", str(DEFAULT_READY_TIMEOUT))

    parser = argparse.ArgumentParser(
        prog="tekton-apply-all",
        description="Apply Tekton resources in dependency order and wait for the EventListener",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply to the default namespace
  tekton-apply-all

  # Apply to a specific namespace and expose the EventListener route
  tekton-apply-all --namespace my-ns --expose-eventlistener

  # Also start a manual PipelineRun
  tekton-apply-all --namespace my-ns --expose-eventlistener --run-pipelinerun
        """
    )
    parser.add_argument(
        "--namespace",
        default=default_ns,
        help=f"Namespace to apply resources into (default: {default_ns} or SN_OC_NS env var)"
    )
    parser.add_argument(
        "--tekton-dir",
        type=Path,
        default=Path(default_dir),
        help=f"Directory containing the Tekton manifests (default: {default_dir} or TEKTON_DIR env var)"
    )
    parser.add_argument(
        "--expose-eventlistener",
        action="store_true",
        help="After applying, expose the EventListener service via 'oc expose'"
    )
    parser.add_argument(
        "--run-pipelinerun",
        action="store_true",
        help=f"Apply {PIPELINERUN_FILE} (manual run) after the pipeline is created"
    )
    parser.add_argument(
        "--port-forward-test",
        action="store_true",
        help="Show port-forward and curl commands to test the EventListener (does NOT run them)"
    )
    parser.add_argument(
        "--timeout",
        type=_positive_int,
        default=default_timeout,
        help=f"Seconds to wait for the EventListener pod to be ready (default: {default_timeout})"
    )
    return parser


def parse_options(argv=None, environ=None):
    """Parse command line arguments into ApplyOptions."""
    args = build_parser(environ).parse_args(argv)
    return ApplyOptions(
        namespace=args.namespace,
        tekton_dir=args.tekton_dir,
        expose_eventlistener=args.expose_eventlistener,
        run_pipelinerun=args.run_pipelinerun,
        port_forward_test=args.port_forward_test,
        timeout=args.timeout,
    )
