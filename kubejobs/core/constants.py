from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class ClusterScope(str, Enum):
    """API groups a cluster handle can be resolved for."""

    BATCH = "batch"
    CORE = "core"


# Label keys and values stamped on managed resources
MANAGED_LABEL = "managed-job"
GROUP_LABEL = "managed-job-group"
JOB_MARKER = "job"
POD_MARKER = "pod"

TERM_ON_EMPTY_ENV = "TERM_ON_EMPTY"
DEFAULT_RESTART_POLICY = "OnFailure"
POD_SUCCEEDED_PHASE = "Succeeded"

# Service account mount inside a pod
SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"
SERVICE_ACCOUNT_CA_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
IN_CLUSTER_HOST = "https://kubernetes"
