"""Shared fixtures: an in-memory cluster and a fake clock."""

import subprocess
from pathlib import Path

import pytest

from tekton_cd.config import FILE_ORDER, PIPELINERUN_FILE
from tekton_cd.errors import KubeCommandError, PreconditionError
from tekton_cd.manifests import load_definition, read_identities


class FakeClock:
    """Manually advanced monotonic clock; sleep() moves time forward."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def ready_pod(name):
    return {
        "metadata": {"name": name},
        "status": {"phase": "Running", "containerStatuses": [{"ready": True}]},
    }


def pending_pod(name):
    return {
        "metadata": {"name": name},
        "status": {"phase": "Pending", "containerStatuses": [{"ready": False}]},
    }


class FakeCluster:
    """Implements the KubeClient surface against in-memory state.

    Applying a file stores its content under (namespace, path), so applying
    the same file twice leaves the state unchanged, like kubectl apply.
    """

    def __init__(self, clock=None, can_expose=False, has_tkn=False):
        self.clock = clock or FakeClock()
        self.can_expose = can_expose
        self.has_tkn = has_tkn
        self.namespaces = set()
        self.state = {}
        self.apply_calls = []
        self.create_calls = []
        self.live = set()
        self.fail_on = {}
        self.services = [{"metadata": {"name": "el-cd-listener"}}]
        self.labelled_services = []
        # Time at which the listener pod becomes ready; None means never.
        self.ready_at = 0.0
        self.pod_queries = []
        self.routes = {}
        self.route_host_for_expose = None
        self.expose_error = None
        self.expose_calls = []
        self.tkn_calls = []
        self.get_all_error = None

    # --- namespaces ---

    def namespace_exists(self, namespace):
        return namespace in self.namespaces

    def create_namespace(self, namespace):
        self.namespaces.add(namespace)

    # --- resources ---

    def apply_resource(self, path, env):
        path = Path(path)
        self.apply_calls.append(path.name)
        if path.name in self.fail_on:
            raise KubeCommandError(
                ["kubectl", "apply", "-f", str(path)], 1, self.fail_on[path.name]
            )
        if load_definition(path).generated:
            raise KubeCommandError(
                ["kubectl", "apply", "-f", str(path)], 1,
                "error: from cd-pipeline-run-: cannot use generate name with apply",
            )
        self.state[(env.namespace, path.name)] = path.read_bytes()
        self.live.update(identity.lower() for identity in read_identities(path))
        return f"{path.name} configured"

    def create_resource(self, path, env):
        path = Path(path)
        self.create_calls.append(path.name)
        if path.name in self.fail_on:
            raise KubeCommandError(
                ["kubectl", "create", "-f", str(path)], 1, self.fail_on[path.name]
            )
        return f"{path.name} created"

    def get_resource_status(self, kind, name, env):
        if f"{kind}/{name}".lower() in self.live:
            return {"kind": kind, "metadata": {"name": name}}
        return None

    def list_resources(self, kind, env, selector=None):
        if kind == "svc":
            return self.labelled_services if selector else self.services
        if kind == "pods":
            self.pod_queries.append((self.clock(), selector))
            if self.ready_at is not None and self.clock() >= self.ready_at:
                return [ready_pod("el-cd-listener-abc12")]
            return [pending_pod("el-cd-listener-abc12")]
        return []

    def get_all_text(self, env):
        if self.get_all_error:
            raise self.get_all_error
        return "NAME                          READY   STATUS\npod/el-cd-listener-abc12   1/1     Running"

    # --- routes ---

    def expose_service(self, service, env):
        self.expose_calls.append(service)
        if not self.can_expose:
            raise PreconditionError("oc is not available on PATH")
        if self.expose_error:
            raise self.expose_error
        self.routes[service] = self.route_host_for_expose

    def get_route_host(self, env, name=None, selector=None):
        if name:
            return self.routes.get(name)
        return next((h for h in self.routes.values() if h), None)

    def tkn_list(self, resource, env):
        self.tkn_calls.append(resource)
        return f"NAME   AGE\n{resource}-1   1m"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cluster(clock):
    return FakeCluster(clock=clock)


@pytest.fixture
def tekton_dir(tmp_path):
    """A .tekton directory with every ordered manifest except clustertasks.yaml."""
    directory = tmp_path / ".tekton"
    directory.mkdir()
    for name in FILE_ORDER[1:-1]:
        (directory / name).write_text(
            f"apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: {Path(name).stem}\n"
        )
    (directory / "eventlistener.yaml").write_text(
        "apiVersion: triggers.tekton.dev/v1beta1\nkind: EventListener\nmetadata:\n  name: cd-listener\n"
    )
    (directory / PIPELINERUN_FILE).write_text(
        "apiVersion: tekton.dev/v1beta1\nkind: PipelineRun\nmetadata:\n  name: cd-pipeline-run-manual\n"
    )
    return directory


class RecordingRunner:
    """Stands in for subprocess.run; replies are matched by command prefix."""

    def __init__(self):
        self.calls = []
        self.replies = []

    def reply(self, prefix, returncode=0, stdout="", stderr=""):
        self.replies.append((list(prefix), returncode, stdout, stderr))

    def __call__(self, cmd):
        self.calls.append(list(cmd))
        for prefix, returncode, stdout, stderr in self.replies:
            if list(cmd[:len(prefix)]) == prefix:
                return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)
        return subprocess.CompletedProcess(cmd, 0, "", "")


@pytest.fixture
def runner():
    return RecordingRunner()
