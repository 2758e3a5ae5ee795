"""Job admission and reaping for queue-driven Kubernetes batch jobs."""

from kubejobs.execution.dispatcher import JobDispatcher
from kubejobs.execution.factory import get_job_dispatcher

__all__ = ["JobDispatcher", "get_job_dispatcher"]
