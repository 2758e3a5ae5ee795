import os
from typing import Optional, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kubejobs.core.constants import (
    Environment,
    IN_CLUSTER_HOST,
    SERVICE_ACCOUNT_CA_PATH,
    SERVICE_ACCOUNT_TOKEN_PATH,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment Profile
    environment: Environment = Environment.LOCAL
    active_environments: List[Environment] = Field(
        default_factory=lambda: list(Environment)
    )

    # Admission
    max_workers: int = 10  # Concurrent unfinished jobs allowed per group
    default_namespace: str = "default"
    randomize_job_names: bool = False

    # Cluster credentials
    service_account_token_path: str = SERVICE_ACCOUNT_TOKEN_PATH
    service_account_ca_path: str = SERVICE_ACCOUNT_CA_PATH
    kubeconfig_path: str = os.path.join(os.path.expanduser("~"), ".kube", "config")
    in_cluster_host: str = IN_CLUSTER_HOST

    # OpenTelemetry
    otel_service_name: str = "kubejobs"
    otel_exporter_endpoint: Optional[str] = None  # e.g. https://api.axiom.co
    otel_exporter_token: Optional[str] = None
    otel_dataset: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """Whether job dispatch runs in the current environment."""
        return self.environment in self.active_environments


settings = Settings()
