"""
Manifest providers.

Supply the Job manifest template for a queue. The template is copied before
normalization, so providers may return a shared dict.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined


class ManifestProvider(ABC):
    """Abstract base class for job manifest sources."""

    @abstractmethod
    def job_manifest(self) -> Dict[str, Any]:
        """
        Return the Job manifest template.

        Returns:
            Nested dict shaped like a batch/v1 Job
        """
        pass


class StaticManifestProvider(ManifestProvider):
    """Provider returning a fixed manifest."""

    def __init__(self, manifest: Dict[str, Any]):
        self.manifest = manifest

    def job_manifest(self) -> Dict[str, Any]:
        return self.manifest

    @classmethod
    def from_yaml(cls, path: str) -> "StaticManifestProvider":
        with open(path) as f:
            return cls(yaml.safe_load(f))


class TemplateManifestProvider(ManifestProvider):
    """Provider rendering a Jinja2 YAML template."""

    def __init__(
        self,
        template_dir: str,
        template_name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.template_name = template_name
        self.context = context or {}
        self.jinja_env = Environment(
            loader=FileSystemLoader(template_dir), undefined=StrictUndefined
        )

    def job_manifest(self) -> Dict[str, Any]:
        context = copy.deepcopy(self.context)

        # Convert env_vars dict to list of {name, value} for template
        if isinstance(context.get("env_vars"), dict):
            context["env_vars"] = [
                {"name": k, "value": v} for k, v in context["env_vars"].items()
            ]

        template = self.jinja_env.get_template(self.template_name)
        return yaml.safe_load(template.render(**context))
