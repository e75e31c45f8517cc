"""
Apply the Tekton resources in dependency order.

Mandatory phase: ensure the namespace, then apply every definition in
FILE_ORDER. A failure there raises and stops the run. Everything after it
(PipelineRun, readiness, route, port-forward hints, summary) is optional and
only ever warns.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from .config import POLL_INTERVAL
from .errors import ApplyError, KubeCommandError, TektonApplyError
from .kube import Environment
from .manifests import ResourceDefinition, load_definition, load_definitions
from .output import banner, log_info, log_success, log_warn
from .readiness import (
    LISTENER_LABEL_SELECTOR,
    discover_listener_service,
    listener_pod_selector,
    wait_until_ready,
)
from .webhook import port_forward_instructions

TKN_RESOURCES = (
    ("pipeline", "Tekton pipelines"),
    ("pipelinerun", "Tekton pipelineruns"),
    ("eventlistener", "Tekton eventlisteners"),
)


@dataclass
class ApplyReport:
    namespace: str
    applied: List[ResourceDefinition] = field(default_factory=list)
    skipped: List[ResourceDefinition] = field(default_factory=list)
    pipelinerun_applied: bool = False
    listener_service: Optional[str] = None
    listener_ready: bool = False
    route_host: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def warn(self, message):
        log_warn(message)
        self.warnings.append(message)


def ensure_environment(client, namespace) -> Environment:
    """Make sure the namespace exists and return a handle on it."""
    log_info(f"Ensuring namespace: {namespace}")
    if client.namespace_exists(namespace):
        log_success(f"Namespace '{namespace}' exists")
    else:
        log_info(f"Namespace '{namespace}' not found. Creating...")
        client.create_namespace(namespace)
        log_success(f"Namespace '{namespace}' created")
    return Environment(namespace=namespace)


def apply_ordered(client, env, definitions, report):
    """Apply each definition in order, skipping missing files.

    Raises ApplyError on the first failure; later definitions are not tried.
    """
    for position, definition in enumerate(definitions, start=1):
        if not definition.exists:
            log_warn(f"Skipping (not found): {definition.path}")
            report.skipped.append(definition)
            continue

        print()
        log_info(f"Applying [{position}/{len(definitions)}]: {definition.describe()}")
        try:
            output = client.apply_resource(definition.path, env)
        except KubeCommandError as e:
            raise ApplyError(definition, position, e) from e
        if output:
            print(output)
        report.applied.append(definition)

    log_success(f"{len(report.applied)} applied, {len(report.skipped)} skipped")


def trigger_run_once(client, env, path, report) -> bool:
    definition = load_definition(path)
    if not definition.exists:
        report.warn(f"No {definition.path.name} found to apply.")
        return False

    print()
    try:
        if definition.generated:
            log_info(f"Creating pipelinerun from manifest (generateName): {definition.describe()}")
            output = client.create_resource(definition.path, env)
        else:
            log_info(f"Applying pipelinerun manifest: {definition.describe()}")
            output = client.apply_resource(definition.path, env)
    except KubeCommandError as e:
        report.warn(f"PipelineRun could not be applied: {e}")
        return False
    if output:
        print(output)
    report.pipelinerun_applied = True
    return True


def confirm_listeners(client, env, definitions, report):
    """Check that every applied EventListener object is live in the namespace."""
    for definition in definitions:
        if definition not in report.applied:
            continue
        for name in definition.names_of("EventListener"):
            try:
                live = client.get_resource_status("eventlistener", name, env)
            except KubeCommandError as e:
                report.warn(f"Could not read EventListener '{name}': {e}")
                continue
            if live is None:
                report.warn(f"EventListener '{name}' from {definition.path.name} not found in "
                            f"namespace {env.namespace}.")
            else:
                log_success(f"EventListener '{name}' exists")


def expose_endpoint(client, env, service, report) -> Optional[str]:
    """Create (or reuse) an OpenShift route for the service and return its host."""
    if not client.can_expose:
        report.warn("oc is not available on PATH; cannot expose EventListener via route. "
                    "Install 'oc' to use this feature.")
        return None

    print()
    host = client.get_route_host(env, name=service)
    if host:
        log_info(f"Route for '{service}' already exists.")
    else:
        log_info(f"Exposing EventListener service '{service}' via OpenShift Route "
                 f"(namespace: {env.namespace})...")
        try:
            client.expose_service(service, env)
        except TektonApplyError as e:
            report.warn(f"oc expose failed ({e}). You may need permissions "
                        "or the service may already be exposed.")
            return None
        host = (client.get_route_host(env, selector=LISTENER_LABEL_SELECTOR)
                or client.get_route_host(env, name=service))

    if not host:
        report.warn(f"Could not determine route host automatically; run: oc get route -n {env.namespace}")
        return None

    log_success(f"Route host: {host}")
    print(f"Webhook URL: http://{host}/")
    print("Configure your GitHub webhook payload URL to that value (Content type: application/json).")
    return host


def summarize(client, env):
    """Print the live resources in the namespace. Never raises on CLI failures."""
    banner("Summary / quick checks")
    try:
        print(client.get_all_text(env))
    except KubeCommandError as e:
        log_warn(f"kubectl get all failed: {e}")

    if not client.has_tkn:
        log_info("tkn not available; Tekton status skipped.")
        return

    for resource, title in TKN_RESOURCES:
        print(f"{title}:")
        try:
            print(client.tkn_list(resource, env))
        except KubeCommandError as e:
            log_warn(f"tkn {resource} ls failed: {e}")


def run(options, client, clock=time.monotonic, sleep=time.sleep) -> ApplyReport:
    """Run the whole apply sequence.

    Raises TektonApplyError when the mandatory phase fails.
    """
    banner("Tekton apply helper")
    print(f"Namespace: {options.namespace}")
    print(f"Tekton dir: {options.tekton_dir}")
    print(f"oc available: {'yes' if client.can_expose else 'no'}")
    print(f"tkn available: {'yes' if client.has_tkn else 'no'}")
    print()

    report = ApplyReport(namespace=options.namespace)
    env = ensure_environment(client, options.namespace)

    definitions = load_definitions(options.ordered_files)
    apply_ordered(client, env, definitions, report)
    confirm_listeners(client, env, definitions, report)

    if options.run_pipelinerun:
        trigger_run_once(client, env, options.pipelinerun_file, report)

    print()
    service = discover_listener_service(client, env)
    report.listener_service = service
    if service:
        log_success(f"Found EventListener service: {service}")
        selector = listener_pod_selector(service)
        report.listener_ready = wait_until_ready(
            client, env, selector, timeout=options.timeout, interval=POLL_INTERVAL,
            clock=clock, sleep=sleep,
        )
        if not report.listener_ready:
            report.warn(f"Could not confirm a pod for EventListener using selector '{selector}'. "
                        f"You can check pods with: kubectl get pods -n {env.namespace}")
    else:
        report.warn(f"EventListener service not auto-detected. Check 'kubectl get svc -n {env.namespace}'.")

    if options.expose_eventlistener:
        if service:
            report.route_host = expose_endpoint(client, env, service, report)
        else:
            report.warn("EventListener service not found; skipping route expose.")

    if options.port_forward_test:
        if service:
            print()
            for line in port_forward_instructions(service, env.namespace):
                print(line)
        else:
            report.warn("EventListener service not found; cannot port-forward.")

    summarize(client, env)
    print()
    if report.warnings:
        log_warn(f"Done with {len(report.warnings)} warning(s).")
    else:
        log_success("Done.")
    return report
