"""
Kubernetes job admission, manifest normalization and reaping.
"""

from kubejobs.execution.admission import AdmissionController
from kubejobs.execution.base import JobSubmitter
from kubejobs.execution.cluster_client import ClusterClientResolver, ClusterCredentials
from kubejobs.execution.dispatcher import JobDispatcher
from kubejobs.execution.labels import LabelSelector
from kubejobs.execution.manifest_provider import (
    ManifestProvider,
    StaticManifestProvider,
    TemplateManifestProvider,
)
from kubejobs.execution.reaper import ReapFailure, ReapResult, ResourceReaper

__all__ = [
    "AdmissionController",
    "ClusterClientResolver",
    "ClusterCredentials",
    "JobDispatcher",
    "JobSubmitter",
    "LabelSelector",
    "ManifestProvider",
    "ReapFailure",
    "ReapResult",
    "ResourceReaper",
    "StaticManifestProvider",
    "TemplateManifestProvider",
]
