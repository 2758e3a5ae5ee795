# Shared pytest fixtures for the kubejobs test suite
import pytest
from unittest.mock import MagicMock

from kubejobs.core.config import Settings
from kubejobs.core.constants import Environment


def make_job(name, completions=1, succeeded=None, namespace="default"):
    """Build a mocked V1Job (external K8s service)."""
    job = MagicMock()
    job.metadata.name = name
    job.metadata.namespace = namespace
    job.spec.completions = completions
    job.status.succeeded = succeeded
    return job


def make_pod(name, phase="Running", namespace="default"):
    """Build a mocked V1Pod (external K8s service)."""
    pod = MagicMock()
    pod.metadata.name = name
    pod.metadata.namespace = namespace
    pod.status.phase = phase
    return pod


def listing(*items):
    """Wrap items the way list_* calls return them."""
    result = MagicMock()
    result.items = list(items)
    return result


@pytest.fixture
def batch_api():
    api = MagicMock()
    api.list_job_for_all_namespaces.return_value = listing()
    api.list_namespaced_job.return_value = listing()
    return api


@pytest.fixture
def core_api():
    api = MagicMock()
    api.list_pod_for_all_namespaces.return_value = listing()
    return api


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        environment=Environment.LOCAL,
        max_workers=5,
        service_account_token_path=str(tmp_path / "token"),
        service_account_ca_path=str(tmp_path / "ca.crt"),
        kubeconfig_path=str(tmp_path / "kubeconfig"),
    )


@pytest.fixture
def render_manifest():
    return {
        "metadata": {"name": "render"},
        "spec": {
            "completions": 1,
            "template": {"spec": {"containers": [{"name": "c"}]}},
        },
    }
