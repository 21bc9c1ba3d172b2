"""Canonical, diff-stable form of live serving objects."""

import copy
from typing import Any, Dict, Iterable, Optional

from ..model.rules import NormalizationRules
from ..model.serving import Revision, Service
from ..utils.logger import get_logger

logger = get_logger(__name__)

TOP_LEVEL_ORDER = ["apiVersion", "kind", "metadata", "spec"]


def prune_empty(value: Any) -> Any:
    """Drop ``None`` values and empty maps/lists, recursively.

    List items are kept in place even when they prune down to nothing, so
    positional meaning (containers, env entries) survives.
    """
    if isinstance(value, dict):
        pruned = {}
        for key, item in value.items():
            item = prune_empty(item)
            if item is None or item == {} or item == []:
                continue
            pruned[key] = item
        return pruned
    if isinstance(value, list):
        return [prune_empty(item) for item in value]
    return value


def _filter_keys(mapping: Optional[Dict[str, str]], ignored: Iterable[str]) -> Dict[str, str]:
    ignored = set(ignored)
    return {key: mapping[key] for key in sorted(mapping or {}) if key not in ignored}


class FieldNormalizer:
    """Strips cluster-injected fields and applies platform defaults."""

    def __init__(self, rules: Optional[NormalizationRules] = None):
        self.rules = rules or NormalizationRules()

    def normalize_service(self, service: Service) -> Service:
        """Return the canonical form of a live service (route left as declared)."""
        spec = copy.deepcopy(service.spec or {})
        template = spec.get("template") or {}

        normalized_spec: Dict[str, Any] = {
            "template": {
                "metadata": self._clean_metadata(template.get("metadata"), [], []),
                "spec": self._default_revision_spec(template.get("spec")),
            }
        }
        # Remaining spec keys (traffic and anything newer) keep their declared form
        for key, value in spec.items():
            if key != "template":
                normalized_spec[key] = value

        data = {
            "apiVersion": service.api_version,
            "kind": service.kind,
            "metadata": self._clean_metadata(
                service.metadata,
                self.rules.service_ignored_labels,
                self.rules.service_ignored_annotations,
            ),
            "spec": normalized_spec,
        }
        logger.debug(f"Normalized service {service.name}")
        return Service.model_validate(self._canonical(data))

    def normalize_revision(self, revision: Revision) -> Revision:
        """Return a revision as it existed at creation time."""
        data = {
            "apiVersion": revision.api_version,
            "kind": revision.kind,
            "metadata": self._clean_metadata(
                revision.metadata,
                self.rules.revision_ignored_labels,
                self.rules.revision_ignored_annotations,
            ),
            "spec": self._default_revision_spec(revision.spec),
        }
        logger.debug(f"Normalized revision {revision.name}")
        return Revision.model_validate(self._canonical(data))

    def _clean_metadata(
        self,
        metadata: Optional[Dict[str, Any]],
        ignored_labels: Iterable[str],
        ignored_annotations: Iterable[str],
    ) -> Dict[str, Any]:
        """Remove cluster-assigned metadata and volatile labels/annotations."""
        metadata = copy.deepcopy(metadata or {})

        for field in self.rules.metadata_fields:
            metadata.pop(field, None)
        if not self.rules.keep_namespace:
            metadata.pop("namespace", None)

        if "labels" in metadata:
            metadata["labels"] = _filter_keys(metadata["labels"], ignored_labels)
        if "annotations" in metadata:
            metadata["annotations"] = _filter_keys(metadata["annotations"], ignored_annotations)

        return metadata

    def _default_revision_spec(self, spec: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        spec = copy.deepcopy(spec or {})
        if spec.get("containerConcurrency") is None:
            spec["containerConcurrency"] = self.rules.default_container_concurrency
        if spec.get("timeoutSeconds") is None:
            spec["timeoutSeconds"] = self.rules.default_timeout_seconds
        return spec

    @staticmethod
    def _canonical(data: Dict[str, Any]) -> Dict[str, Any]:
        data = prune_empty(data)
        ordered = {key: data[key] for key in TOP_LEVEL_ORDER if key in data}
        for key in data:
            ordered.setdefault(key, data[key])
        return ordered
