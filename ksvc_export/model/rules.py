"""Normalization rules configuration."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import RulesError
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Values the platform assumes when the template leaves them unset
DEFAULT_CONTAINER_CONCURRENCY = 0
DEFAULT_TIMEOUT_SECONDS = 300

CLUSTER_METADATA_FIELDS = [
    "managedFields",
    "resourceVersion",
    "uid",
    "generation",
    "creationTimestamp",
    "selfLink",
    "ownerReferences",
    "finalizers",
    "generateName",
    "deletionTimestamp",
    "deletionGracePeriodSeconds",
]

SERVICE_IGNORED_ANNOTATIONS = [
    "serving.knative.dev/creator",
    "serving.knative.dev/lastModifier",
    "kubectl.kubernetes.io/last-applied-configuration",
]

REVISION_IGNORED_LABELS = [
    "serving.knative.dev/configurationUID",
    "serving.knative.dev/serviceUID",
    "serving.knative.dev/routingState",
]

REVISION_IGNORED_ANNOTATIONS = [
    "serving.knative.dev/routingStateModified",
    "serving.knative.dev/lastPinned",
    "serving.knative.dev/routes",
    "kubectl.kubernetes.io/last-applied-configuration",
]


class NormalizationRules(BaseModel):
    """Which fields the normalizer defaults and which it strips."""

    default_container_concurrency: int = DEFAULT_CONTAINER_CONCURRENCY
    default_timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    keep_namespace: bool = False
    metadata_fields: List[str] = Field(default_factory=lambda: list(CLUSTER_METADATA_FIELDS))
    service_ignored_labels: List[str] = Field(default_factory=list)
    service_ignored_annotations: List[str] = Field(
        default_factory=lambda: list(SERVICE_IGNORED_ANNOTATIONS)
    )
    revision_ignored_labels: List[str] = Field(
        default_factory=lambda: list(REVISION_IGNORED_LABELS)
    )
    revision_ignored_annotations: List[str] = Field(
        default_factory=lambda: list(REVISION_IGNORED_ANNOTATIONS)
    )

    class Config:
        frozen = True

    @classmethod
    def from_file(cls, config_path: Optional[Path]) -> "NormalizationRules":
        """Load rules from a YAML or JSON file; defaults when no file is given."""
        if config_path is None:
            return cls()

        config_path = Path(config_path)
        if not config_path.exists():
            logger.warning(f"Rules file {config_path} not found, using defaults")
            return cls()

        try:
            with open(config_path, "r") as f:
                if config_path.suffix in (".yaml", ".yml"):
                    config: Dict[str, Any] = yaml.safe_load(f) or {}
                else:
                    config = json.load(f)
            rules = cls.model_validate(config)
        except (OSError, yaml.YAMLError, json.JSONDecodeError, ValidationError) as e:
            raise RulesError(f"Failed to load normalization rules from {config_path}: {e}") from e

        logger.info(f"Loaded normalization rules from {config_path}")
        return rules
