"""Sources of live serving objects."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

import yaml
from pydantic import ValidationError

from ..errors import FetchError, MalformedInput
from ..model.serving import SERVICE_LABEL, Revision, Service
from ..utils.logger import get_logger
from .client import K8sClient

logger = get_logger(__name__)


def _parse_service(item: Dict[str, Any]) -> Service:
    try:
        return Service.model_validate(item)
    except ValidationError as e:
        raise MalformedInput(f"Invalid service object: {e}") from e


def _parse_revisions(items: Iterable[Dict[str, Any]]) -> List[Revision]:
    revisions = []
    for item in items:
        try:
            revisions.append(Revision.model_validate(item))
        except ValidationError as e:
            raise MalformedInput(f"Invalid revision object: {e}") from e
    return revisions


class ServiceFetcher:
    """Fetches a Knative service and its revisions through kubectl."""

    SERVICE_RESOURCE = "ksvc"
    REVISION_RESOURCE = "revisions"

    def __init__(self, client: K8sClient):
        self.client = client

    def fetch(self, name: str) -> Tuple[Service, List[Revision]]:
        """Fetch the service and every revision labelled as belonging to it."""
        logger.info(f"Fetching service {name}")
        data = self.client.get_json(self.SERVICE_RESOURCE, name)
        if not data:
            raise FetchError(f"Service '{name}' could not be fetched")
        service = _parse_service(data)

        revision_data = self.client.get_json(
            self.REVISION_RESOURCE, label_selector=f"{SERVICE_LABEL}={name}"
        )
        if revision_data is None:
            raise FetchError(f"Revisions of service '{name}' could not be fetched")
        revisions = _parse_revisions(revision_data.get("items", []))

        logger.info(f"Fetched service {name} with {len(revisions)} revision(s)")
        return service, revisions


class FileSource:
    """Reads previously saved service and revision objects from disk.

    Accepts YAML document streams or JSON, holding ``Service`` and
    ``Revision`` objects directly or wrapped in ``List`` objects.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch(self, name: str) -> Tuple[Service, List[Revision]]:
        """Return the named service and the revisions labelled as its own."""
        services = []
        revision_items = []
        for obj in self._objects():
            kind = obj.get("kind")
            if kind == "Service" and (obj.get("metadata") or {}).get("name") == name:
                services.append(obj)
            elif kind == "Revision":
                revision_items.append(obj)

        if not services:
            raise FetchError(f"Service '{name}' not found in {self.path}")
        if len(services) > 1:
            raise MalformedInput(f"Service '{name}' appears {len(services)} times in {self.path}")

        revisions = [
            r for r in _parse_revisions(revision_items) if r.service_name in (None, name)
        ]
        logger.info(f"Loaded service {name} with {len(revisions)} revision(s) from {self.path}")
        return _parse_service(services[0]), revisions

    def _objects(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path) as f:
                if self.path.suffix == ".json":
                    documents = [json.load(f)]
                else:
                    documents = list(yaml.safe_load_all(f))
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise FetchError(f"Failed to read {self.path}: {e}") from e

        objects = []
        for doc in documents:
            if not doc or not isinstance(doc, dict):
                continue
            # v1/List as well as typed lists such as RevisionList
            if str(doc.get("kind", "")).endswith("List"):
                objects.extend(item for item in doc.get("items", []) if isinstance(item, dict))
            else:
                objects.append(doc)
        return objects
