"""
Base submitter interface.

The queue producer holds a JobSubmitter and calls it from its enqueue hook.
"""

from abc import ABC, abstractmethod

from kubejobs.execution.manifest_provider import ManifestProvider


class JobSubmitter(ABC):
    """Abstract base class for job submitters."""

    @abstractmethod
    def on_enqueue(self, manifest_provider: ManifestProvider) -> bool:
        """
        Launch a job for a newly enqueued work item, if admitted.

        Args:
            manifest_provider: Supplies the job manifest template

        Returns:
            True if a job was created, False if it was skipped
        """
        pass
