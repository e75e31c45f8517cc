"""
Test payloads for the EventListener.

The TriggerBinding reads ``body.repository.url`` and ``body.ref``, so a
minimal GitHub push event carries just those two fields.
"""

import json

import requests

from .output import log_error, log_info, log_success

DEFAULT_REPO_URL = "https://github.com/ibm-developer-skills-network/wtecc-CICD_PracticeCode"
DEFAULT_REF = "refs/heads/main"
LOCAL_PORT = 8090
LISTENER_PORT = 8080


def build_payload(repo_url=DEFAULT_REPO_URL, ref=DEFAULT_REF):
    return {"ref": ref, "repository": {"url": repo_url}}


def port_forward_instructions(service, namespace, repo_url=DEFAULT_REPO_URL, ref=DEFAULT_REF):
    """Lines telling the operator how to reach the listener locally."""
    payload = json.dumps(build_payload(repo_url, ref), separators=(",", ":"))
    return [
        "To test locally using port-forward, run this in a separate terminal:",
        f"  kubectl port-forward service/{service} {LOCAL_PORT}:{LISTENER_PORT} -n {namespace}",
        "",
        "Then, from another terminal, POST a test payload (example):",
        f"  curl -X POST http://localhost:{LOCAL_PORT} -H 'Content-Type: application/json' \\",
        f"    -d '{payload}'",
        "",
        "Or run: python3 scripts/send_test_webhook.py",
    ]


def send_test_payload(url, repo_url=DEFAULT_REPO_URL, ref=DEFAULT_REF, timeout=10):
    """POST the test payload to the listener and return the response.

    Raises requests.RequestException on connection errors and non-2xx replies.
    """
    payload = build_payload(repo_url, ref)
    log_info(f"Posting test payload to {url} (ref: {ref})")
    response = requests.post(
        url,
        json=payload,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )
    try:
        response.raise_for_status()
    except requests.HTTPError:
        log_error(f"EventListener rejected the payload: {response.status_code} {response.text}")
        raise
    log_success(f"EventListener accepted the payload ({response.status_code})")
    return response
