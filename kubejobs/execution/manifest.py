"""
Job manifest normalization.

Every step mutates the manifest in place, returns it, and is idempotent.
"""

import base64
import secrets
from typing import Any, Dict

from kubejobs.core.constants import (
    DEFAULT_RESTART_POLICY,
    GROUP_LABEL,
    JOB_MARKER,
    MANAGED_LABEL,
    POD_MARKER,
    TERM_ON_EMPTY_ENV,
)
from kubejobs.core.exceptions import ManifestError

Manifest = Dict[str, Any]

DEFAULT_NAMESPACE = "default"


def job_name(manifest: Manifest) -> str:
    """Name of the job, which is also its concurrency group."""
    if not isinstance(manifest, dict):
        raise ManifestError(f"Job manifest must be a mapping, got {type(manifest)}")
    metadata = manifest.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ManifestError("Job manifest metadata must be a mapping")
    name = metadata.get("name")
    if not name:
        raise ManifestError("Job manifest is missing metadata.name")
    return name


def _pod_template(manifest: Manifest) -> Dict[str, Any]:
    if manifest.get("spec") is None:
        manifest["spec"] = {}
    spec = manifest["spec"]
    if spec.get("template") is None:
        spec["template"] = {}
    return spec["template"]


def _pod_spec(manifest: Manifest) -> Dict[str, Any]:
    template = _pod_template(manifest)
    if template.get("spec") is None:
        template["spec"] = {}
    return template["spec"]


def ensure_namespace(manifest: Manifest, default: str = DEFAULT_NAMESPACE) -> Manifest:
    """Default metadata.namespace; an existing namespace is kept."""
    if not isinstance(manifest, dict):
        raise ManifestError(f"Job manifest must be a mapping, got {type(manifest)}")
    if manifest.get("metadata") is None:
        manifest["metadata"] = {}
    if manifest["metadata"].get("namespace") is None:
        manifest["metadata"]["namespace"] = default
    return manifest


def add_labels(manifest: Manifest) -> Manifest:
    """Stamp the managed and group labels, overwriting stale values."""
    name = job_name(manifest)

    metadata = manifest["metadata"]
    if metadata.get("labels") is None:
        metadata["labels"] = {}
    metadata["labels"][MANAGED_LABEL] = JOB_MARKER
    metadata["labels"][GROUP_LABEL] = name

    template = _pod_template(manifest)
    if template.get("metadata") is None:
        template["metadata"] = {}
    if template["metadata"].get("labels") is None:
        template["metadata"]["labels"] = {}
    template["metadata"]["labels"][MANAGED_LABEL] = POD_MARKER
    return manifest


def ensure_term_on_empty(manifest: Manifest) -> Manifest:
    """Upsert TERM_ON_EMPTY=1 into every container's env."""
    pod_spec = _pod_spec(manifest)
    if pod_spec.get("containers") is None:
        pod_spec["containers"] = []

    for container in pod_spec["containers"]:
        if container.get("env") is None:
            container["env"] = []
        entry = next(
            (env for env in container["env"] if env.get("name") == TERM_ON_EMPTY_ENV),
            None,
        )
        if entry is None:
            entry = {"name": TERM_ON_EMPTY_ENV}
            container["env"].append(entry)
        entry["value"] = "1"
    return manifest


def ensure_restart_policy(manifest: Manifest) -> Manifest:
    """Default the pod restart policy; an explicit choice is kept."""
    pod_spec = _pod_spec(manifest)
    if pod_spec.get("restartPolicy") is None:
        pod_spec["restartPolicy"] = DEFAULT_RESTART_POLICY
    return manifest


def normalize(manifest: Manifest, default_namespace: str = DEFAULT_NAMESPACE) -> Manifest:
    """Apply every normalization step, resolving the namespace first."""
    ensure_namespace(manifest, default_namespace)
    add_labels(manifest)
    ensure_term_on_empty(manifest)
    ensure_restart_policy(manifest)
    return manifest


def dns_safe_random(n: int = 5) -> str:
    """Returns an n-length string of characters [a-z2-7]."""
    encoded = base64.b32encode(secrets.token_bytes(n)).decode("ascii")
    return encoded.rstrip("=").lower()[:n]


def update_job_name(manifest: Manifest, n: int = 5) -> Manifest:
    """Append a random suffix so jobs in one group get distinct names."""
    manifest["metadata"]["name"] = f"{job_name(manifest)}-{dns_safe_random(n)}"
    return manifest
