"""
EventListener discovery and readiness polling.

Tekton Triggers creates a Service named ``el-<listener>`` for every
EventListener and labels the listener's pods with ``eventlistener=<listener>``.
Discovery is best effort; callers treat a miss as a warning.
"""

import time
from typing import Optional

from .errors import KubeCommandError
from .output import log_info, log_success, log_warn

SERVICE_PREFIX = "el-"
SERVICE_SUBSTRINGS = ("eventlistener", "cd-listener")
LISTENER_LABEL_SELECTOR = "app.kubernetes.io/component=eventlistener"


def _names(items):
    return [item.get("metadata", {}).get("name", "") for item in items]


def discover_listener_service(client, env) -> Optional[str]:
    """Find the EventListener service: prefix match, then substring, then label."""
    log_info(f"Detecting EventListener service in namespace {env.namespace}...")
    try:
        names = [n for n in _names(client.list_resources("svc", env)) if n]
    except KubeCommandError as e:
        log_warn(f"Could not list services: {e}")
        return None

    for name in names:
        if name.startswith(SERVICE_PREFIX):
            return name
    for name in names:
        if any(s in name for s in SERVICE_SUBSTRINGS):
            return name

    try:
        labelled = _names(client.list_resources("svc", env, selector=LISTENER_LABEL_SELECTOR))
    except KubeCommandError as e:
        log_warn(f"Could not list services by label: {e}")
        return None
    return next((n for n in labelled if n), None)


def listener_pod_selector(service: str) -> str:
    name = service[len(SERVICE_PREFIX):] if service.startswith(SERVICE_PREFIX) else service
    return f"eventlistener={name}"


def pod_is_ready(pod) -> bool:
    """Running, and every container reports ready."""
    status = pod.get("status", {})
    if status.get("phase") != "Running":
        return False
    containers = status.get("containerStatuses") or []
    return bool(containers) and all(c.get("ready") for c in containers)


def wait_until_ready(client, env, selector, timeout=60, interval=3,
                     clock=time.monotonic, sleep=time.sleep) -> bool:
    """Poll for a ready pod matching selector.

    Returns True on the first ready observation, False once ``timeout``
    seconds have elapsed without one. Never gives up before the timeout.
    """
    log_info(f"Waiting for pod matching selector '{selector}' to be Ready (timeout {timeout}s)...")
    start = clock()
    while True:
        try:
            pods = client.list_resources("pods", env, selector=selector)
        except KubeCommandError:
            pods = []
        for pod in pods:
            if pod_is_ready(pod):
                log_success(f"Pod {pod.get('metadata', {}).get('name')} is Running and Ready.")
                return True

        if clock() - start >= timeout:
            log_warn(f"Timeout waiting for pods matching '{selector}'.")
            return False
        sleep(interval)
