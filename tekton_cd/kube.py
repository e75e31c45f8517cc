"""
Thin typed client over the kubectl, oc and tkn command line tools.

Every call takes an explicit Environment instead of relying on the current
kubeconfig context, and reads structured output (-o json) where the CLI
offers it.
"""

import json
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import KubeCommandError, KubeOutputError, PreconditionError


@dataclass(frozen=True)
class Environment:
    """Handle on the target namespace."""
    namespace: str


@dataclass(frozen=True)
class Tools:
    """Client binaries found on PATH."""
    kubectl: str = "kubectl"
    oc: Optional[str] = None
    tkn: Optional[str] = None


def run_command(cmd, check=False, capture_output=True):
    """Run a command and return the result."""
    result = subprocess.run(
        cmd,
        capture_output=capture_output,
        text=True,
        check=check
    )
    return result


def detect_tools(which=shutil.which):
    """Locate kubectl (required) and oc/tkn (optional)."""
    if not which("kubectl"):
        raise PreconditionError("kubectl not found in PATH. Install/obtain kubectl and try again.")
    return Tools(
        kubectl="kubectl",
        oc="oc" if which("oc") else None,
        tkn="tkn" if which("tkn") else None,
    )


class KubeClient:
    """Apply, query, expose and list resources through the cluster CLIs."""

    def __init__(self, tools=None, runner=run_command):
        self.tools = tools or Tools()
        self._run = runner

    @property
    def can_expose(self) -> bool:
        return self.tools.oc is not None

    @property
    def has_tkn(self) -> bool:
        return self.tools.tkn is not None

    def _call(self, cmd: List[str]) -> str:
        result = self._run(cmd)
        if result.returncode != 0:
            raise KubeCommandError(cmd, result.returncode, result.stderr or result.stdout)
        return result.stdout or ""

    def _call_json(self, cmd: List[str]) -> Dict:
        cmd = cmd + ["-o", "json"]
        output = self._call(cmd)
        try:
            return json.loads(output) if output.strip() else {}
        except json.JSONDecodeError as e:
            raise KubeOutputError(cmd, str(e)) from e

    # --- namespaces ---

    def namespace_exists(self, namespace: str) -> bool:
        result = self._run([self.tools.kubectl, "get", "namespace", namespace])
        return result.returncode == 0

    def create_namespace(self, namespace: str) -> None:
        self._call([self.tools.kubectl, "create", "namespace", namespace])

    # --- resources ---

    def apply_resource(self, path, env: Environment) -> str:
        """kubectl apply -f PATH into the environment; returns the CLI output."""
        return self._call(
            [self.tools.kubectl, "apply", "-f", str(path), "-n", env.namespace]
        ).strip()

    def create_resource(self, path, env: Environment) -> str:
        """kubectl create -f PATH; for objects that only carry metadata.generateName."""
        return self._call(
            [self.tools.kubectl, "create", "-f", str(path), "-n", env.namespace]
        ).strip()

    def get_resource_status(self, kind: str, name: str, env: Environment) -> Optional[Dict]:
        """Return the live object, or None when it does not exist."""
        try:
            return self._call_json([self.tools.kubectl, "get", kind, name, "-n", env.namespace])
        except KubeOutputError:
            raise
        except KubeCommandError as e:
            if "NotFound" in e.stderr or "not found" in e.stderr.lower():
                return None
            raise

    def list_resources(self, kind: str, env: Environment, selector: Optional[str] = None) -> List[Dict]:
        cmd = [self.tools.kubectl, "get", kind, "-n", env.namespace]
        if selector:
            cmd.append(f"--selector={selector}")
        return self._call_json(cmd).get("items", [])

    def get_all_text(self, env: Environment) -> str:
        return self._call([self.tools.kubectl, "get", "all", "-n", env.namespace])

    # --- routes (OpenShift) ---

    def expose_service(self, service: str, env: Environment) -> str:
        if not self.can_expose:
            raise PreconditionError("oc is not available on PATH")
        return self._call([self.tools.oc, "expose", f"svc/{service}", "-n", env.namespace]).strip()

    def get_route_host(self, env: Environment, name: Optional[str] = None,
                       selector: Optional[str] = None) -> Optional[str]:
        """Host of the named route, or of the first route matching selector."""
        if not self.can_expose:
            raise PreconditionError("oc is not available on PATH")
        cmd = [self.tools.oc, "get", "route"]
        if name:
            cmd.append(name)
        elif selector:
            cmd.append(f"--selector={selector}")
        try:
            data = self._call_json(cmd + ["-n", env.namespace])
        except KubeCommandError:
            return None
        routes = [data] if name else data.get("items", [])
        for route in routes:
            host = route.get("spec", {}).get("host")
            if host:
                return host
        return None

    # --- tkn ---

    def tkn_list(self, resource: str, env: Environment) -> str:
        if not self.has_tkn:
            raise PreconditionError("tkn is not available on PATH")
        return self._call([self.tools.tkn, resource, "ls", "-n", env.namespace])
