"""
Cluster client resolution.

Builds scoped Kubernetes API handles from whichever credential source is
available:
- the pod's service account token and CA bundle (in-cluster)
- the operator's kubeconfig, whose auth provider supplies the bearer token
"""

import os
from typing import Optional, Union

from kubernetes import client, config
from pydantic import BaseModel, Field

from kubejobs.core.config import Settings
from kubejobs.core.constants import (
    ClusterScope,
    IN_CLUSTER_HOST,
    SERVICE_ACCOUNT_CA_PATH,
    SERVICE_ACCOUNT_TOKEN_PATH,
)
from kubejobs.core.telemetry import get_logger

logger = get_logger(__name__)

ClusterHandle = Union[client.BatchV1Api, client.CoreV1Api]


class ClusterCredentials(BaseModel):
    """Where to look for cluster credentials."""

    token_path: str = Field(
        default=SERVICE_ACCOUNT_TOKEN_PATH,
        description="Service account bearer token mounted into the pod",
    )
    ca_path: str = Field(
        default=SERVICE_ACCOUNT_CA_PATH,
        description="CA bundle for the in-cluster API server",
    )
    kubeconfig_path: str = Field(
        default_factory=lambda: os.path.join(
            os.path.expanduser("~"), ".kube", "config"
        ),
        description="Operator kubeconfig used outside the cluster",
    )
    in_cluster_host: str = Field(
        default=IN_CLUSTER_HOST, description="API server address inside the cluster"
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClusterCredentials":
        return cls(
            token_path=settings.service_account_token_path,
            ca_path=settings.service_account_ca_path,
            kubeconfig_path=settings.kubeconfig_path,
            in_cluster_host=settings.in_cluster_host,
        )


class ClusterClientResolver:
    """Resolves API handles for a cluster scope."""

    def __init__(self, credentials: Optional[ClusterCredentials] = None):
        self.credentials = credentials or ClusterCredentials()

    def resolve(self, scope: ClusterScope) -> Optional[ClusterHandle]:
        """
        Resolve an API handle for the given scope.

        Args:
            scope: BATCH for job resources, CORE for pods

        Returns:
            BatchV1Api or CoreV1Api bound to the resolved credentials, or None
            when no credential source exists
        """
        api_client = self._api_client()
        if api_client is None:
            logger.warning(
                f"No cluster credentials found for {scope.value} scope "
                f"(checked {self.credentials.token_path} and "
                f"{self.credentials.kubeconfig_path})"
            )
            return None

        if scope == ClusterScope.BATCH:
            return client.BatchV1Api(api_client)
        return client.CoreV1Api(api_client)

    def _api_client(self) -> Optional[client.ApiClient]:
        creds = self.credentials

        if os.path.exists(creds.token_path):
            # Running inside the cluster: service account token and CA bundle
            with open(creds.token_path) as f:
                token = f.read().strip()

            configuration = client.Configuration()
            configuration.host = creds.in_cluster_host
            configuration.ssl_ca_cert = creds.ca_path
            configuration.api_key = {"authorization": token}
            configuration.api_key_prefix = {"authorization": "Bearer"}
            logger.info(f"Using in-cluster credentials for {creds.in_cluster_host}")
            return client.ApiClient(configuration)

        if os.path.exists(creds.kubeconfig_path):
            # Local development: kubectl config, token from its auth provider
            logger.info(f"Using kubeconfig at {creds.kubeconfig_path}")
            return config.new_client_from_config(config_file=creds.kubeconfig_path)

        return None
