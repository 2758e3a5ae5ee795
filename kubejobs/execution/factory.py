from typing import Optional

from kubejobs.core.config import settings
from kubejobs.core.telemetry import get_logger
from kubejobs.execution.dispatcher import JobDispatcher

logger = get_logger(__name__)

# Global instance
_job_dispatcher: Optional[JobDispatcher] = None


def get_job_dispatcher() -> JobDispatcher:
    """
    Get the process-wide job dispatcher.

    Cluster handles are memoized on the dispatcher, so they are resolved once
    per process.

    Returns:
        JobDispatcher: The dispatcher instance
    """
    global _job_dispatcher

    if _job_dispatcher is None:
        _job_dispatcher = JobDispatcher(settings)
        logger.info(
            f"Initialized job dispatcher (max_workers={settings.max_workers}, "
            f"environment={settings.environment.value})"
        )

    return _job_dispatcher
