"""
Per-group admission control.

Caps the number of unfinished managed jobs in a group. The count is taken
from the cluster on every call with no locking, so concurrent callers can
both see room under the cap and overshoot it.
"""

from kubernetes import client

from kubejobs.core.telemetry import get_logger
from kubejobs.execution.labels import LabelSelector
from kubejobs.execution.reaper import is_job_finished

logger = get_logger(__name__)


class AdmissionController:
    """Decides whether a new job may be created for a group."""

    def running_jobs(
        self, batch_api: client.BatchV1Api, group: str, namespace: str
    ) -> int:
        """Count jobs in the group that have not finished."""
        jobs = batch_api.list_namespaced_job(
            namespace=namespace,
            label_selector=str(LabelSelector.job_group(group)),
        ).items
        return sum(1 for job in jobs if not is_job_finished(job))

    def is_admitted(
        self,
        batch_api: client.BatchV1Api,
        group: str,
        namespace: str,
        max_workers: int,
    ) -> bool:
        running = self.running_jobs(batch_api, group, namespace)

        if running > max_workers:
            logger.warning(
                f"Group {group} has {running} running jobs, above the cap of {max_workers}"
            )

        # Only an exact match denies
        return running != max_workers
