"""
Reaping of finished jobs and pods.

Deletes managed resources that have run to completion so the number of live
objects in the cluster stays bounded. Deletion is best effort: a resource
that cannot be deleted is recorded and the sweep moves on.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from kubejobs.core.constants import POD_SUCCEEDED_PHASE
from kubejobs.core.telemetry import get_logger, trace_span
from kubejobs.execution.labels import LabelSelector

logger = get_logger(__name__)

# API rejections and transport failures (resets, timeouts)
DeleteError = Union[ApiException, HTTPError]


def is_job_finished(job: client.V1Job) -> bool:
    """A job is finished once its succeeded count reaches its completions."""
    # The API omits zero counters
    succeeded = (job.status.succeeded if job.status else None) or 0
    return job.spec.completions == succeeded


def is_pod_finished(pod: client.V1Pod) -> bool:
    return pod.status is not None and pod.status.phase == POD_SUCCEEDED_PHASE


@dataclass
class ReapFailure:
    resource: Any
    error: DeleteError

    @property
    def name(self) -> str:
        return self.resource.metadata.name


@dataclass
class ReapResult:
    """Outcome of one sweep."""

    deleted: List[Any] = field(default_factory=list)
    failures: List[ReapFailure] = field(default_factory=list)


class ResourceReaper:
    """Deletes finished resources matching a label selector."""

    def reap(
        self,
        list_fn: Callable[..., Any],
        selector: LabelSelector,
        is_finished: Callable[[Any], bool],
        delete_fn: Callable[[Any], None],
    ) -> ReapResult:
        """
        Sweep resources matching a selector.

        Args:
            list_fn: Cluster listing call accepting label_selector
            selector: Managed-resource selector
            is_finished: Predicate picking resources to delete
            delete_fn: Deletes one resource

        Returns:
            ReapResult with deleted resources and per-resource failures

        Raises:
            ApiException: If listing fails
        """
        resources = list_fn(label_selector=str(selector)).items
        finished = [resource for resource in resources if is_finished(resource)]

        result = ReapResult()
        for resource in finished:
            error = self._delete(resource, delete_fn)
            if error is None:
                result.deleted.append(resource)
            else:
                result.failures.append(ReapFailure(resource=resource, error=error))

        for failure in result.failures:
            logger.warning(
                f"Cannot delete {failure.name} ({selector}): "
                f"{type(failure.error).__name__}: {failure.error}"
            )
        return result

    def _delete(
        self, resource: Any, delete_fn: Callable[[Any], None]
    ) -> Optional[DeleteError]:
        try:
            delete_fn(resource)
        except (ApiException, HTTPError) as e:
            return e
        return None

    @trace_span
    def reap_finished_jobs(self, batch_api: client.BatchV1Api) -> ReapResult:
        """Delete managed jobs whose pods have all succeeded."""

        def delete(job: client.V1Job) -> None:
            batch_api.delete_namespaced_job(
                name=job.metadata.name,
                namespace=job.metadata.namespace,
                propagation_policy="Background",  # Delete pods in background
            )

        result = self.reap(
            batch_api.list_job_for_all_namespaces,
            LabelSelector.jobs(),
            is_job_finished,
            delete,
        )
        if result.deleted:
            logger.info(f"Reaped {len(result.deleted)} finished jobs")
        return result

    @trace_span
    def reap_finished_pods(self, core_api: client.CoreV1Api) -> ReapResult:
        """Delete managed pods in the Succeeded phase."""

        def delete(pod: client.V1Pod) -> None:
            core_api.delete_namespaced_pod(
                name=pod.metadata.name, namespace=pod.metadata.namespace
            )

        result = self.reap(
            core_api.list_pod_for_all_namespaces,
            LabelSelector.pods(),
            is_pod_finished,
            delete,
        )
        if result.deleted:
            logger.info(f"Reaped {len(result.deleted)} succeeded pods")
        return result
