"""
Label selectors scoping cluster listings to managed resources.
"""

from dataclasses import dataclass
from typing import Optional

from kubejobs.core.constants import GROUP_LABEL, JOB_MARKER, MANAGED_LABEL, POD_MARKER


@dataclass(frozen=True)
class LabelSelector:
    """Selector on the managed marker, optionally narrowed to one group."""

    marker: str
    group: Optional[str] = None

    @classmethod
    def jobs(cls) -> "LabelSelector":
        return cls(marker=JOB_MARKER)

    @classmethod
    def pods(cls) -> "LabelSelector":
        return cls(marker=POD_MARKER)

    @classmethod
    def job_group(cls, group: str) -> "LabelSelector":
        return cls(marker=JOB_MARKER, group=group)

    def __str__(self) -> str:
        selector = f"{MANAGED_LABEL}={self.marker}"
        if self.group is not None:
            selector += f",{GROUP_LABEL}={self.group}"
        return selector
