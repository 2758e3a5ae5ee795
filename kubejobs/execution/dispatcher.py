"""
Job dispatcher.

Entry point called from the queue's enqueue hook. Each call sweeps finished
jobs and pods, checks the group's concurrency cap, and creates the job if
there is room.
"""

import copy
from typing import Optional

from kubernetes import client
from kubernetes.client.rest import ApiException

from kubejobs.core.config import Settings, settings as default_settings
from kubejobs.core.constants import ClusterScope
from kubejobs.core.exceptions import ClusterConnectionError, JobSubmissionError
from kubejobs.core.telemetry import get_logger, trace_span
from kubejobs.execution.admission import AdmissionController
from kubejobs.execution.base import JobSubmitter
from kubejobs.execution.cluster_client import ClusterClientResolver, ClusterCredentials
from kubejobs.execution.manifest import (
    add_labels,
    ensure_namespace,
    ensure_restart_policy,
    ensure_term_on_empty,
    job_name,
    update_job_name,
)
from kubejobs.execution.manifest_provider import ManifestProvider
from kubejobs.execution.reaper import ResourceReaper

logger = get_logger(__name__)


class JobDispatcher(JobSubmitter):
    """Submits Kubernetes jobs for enqueued work, within a per-group cap."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resolver: Optional[ClusterClientResolver] = None,
        reaper: Optional[ResourceReaper] = None,
        admission: Optional[AdmissionController] = None,
    ):
        self.settings = settings or default_settings
        self.resolver = resolver or ClusterClientResolver(
            ClusterCredentials.from_settings(self.settings)
        )
        self.reaper = reaper or ResourceReaper()
        self.admission = admission or AdmissionController()
        self._batch_api: Optional[client.BatchV1Api] = None
        self._core_api: Optional[client.CoreV1Api] = None

    @property
    def batch_api(self) -> client.BatchV1Api:
        if self._batch_api is None:
            self._batch_api = self._resolve(ClusterScope.BATCH)
        return self._batch_api

    @property
    def core_api(self) -> client.CoreV1Api:
        if self._core_api is None:
            self._core_api = self._resolve(ClusterScope.CORE)
        return self._core_api

    def _resolve(self, scope: ClusterScope):
        handle = self.resolver.resolve(scope)
        if handle is None:
            raise ClusterConnectionError(
                f"No cluster credentials available for {scope.value} API"
            )
        return handle

    @trace_span
    def on_enqueue(self, manifest_provider: ManifestProvider) -> bool:
        """
        Launch a job for an enqueued work item if its group has room.

        Args:
            manifest_provider: Supplies the job manifest template

        Returns:
            True if a job was created, False if dispatch is inactive in this
            environment or the group is at its cap

        Raises:
            ClusterConnectionError: If no cluster credentials are available
            JobSubmissionError: If the cluster rejects the job
            ManifestError: If the manifest is not a mapping or has no name
            ApiException: If listing jobs or pods fails
        """
        if not self.settings.is_active:
            logger.debug(
                f"Job dispatch inactive in {self.settings.environment.value} environment"
            )
            return False

        self.reaper.reap_finished_jobs(self.batch_api)
        self.reaper.reap_finished_pods(self.core_api)

        manifest = copy.deepcopy(manifest_provider.job_manifest())
        group = job_name(manifest)
        ensure_namespace(manifest, self.settings.default_namespace)
        namespace = manifest["metadata"]["namespace"]

        # Do not start job if we have reached our maximum count
        if not self.admission.is_admitted(
            self.batch_api, group, namespace, self.settings.max_workers
        ):
            logger.info(
                f"Group {group} is at {self.settings.max_workers} running jobs, not creating job"
            )
            return False

        add_labels(manifest)
        ensure_term_on_empty(manifest)
        ensure_restart_policy(manifest)
        if self.settings.randomize_job_names:
            update_job_name(manifest)

        name = manifest["metadata"]["name"]
        try:
            self.batch_api.create_namespaced_job(namespace=namespace, body=manifest)
        except ApiException as e:
            raise JobSubmissionError(f"Failed to create K8s job {name}: {e}") from e

        logger.info(f"Created job {name} in namespace {namespace}")
        return True
