"""Knative Serving resource models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import MalformedInput

SERVING_API_VERSION = "serving.knative.dev/v1"
LIST_API_VERSION = "v1"

CONFIGURATION_GENERATION_LABEL = "serving.knative.dev/configurationGeneration"
SERVICE_LABEL = "serving.knative.dev/service"


class K8sResource(BaseModel):
    """Kubernetes resource as returned by the API server."""

    api_version: str = Field("", alias="apiVersion")
    kind: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    spec: Optional[Dict[str, Any]] = None
    status: Optional[Dict[str, Any]] = None

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def name(self) -> str:
        """Get resource name."""
        return self.metadata.get("name", "")

    @property
    def namespace(self) -> Optional[str]:
        """Get resource namespace."""
        return self.metadata.get("namespace")

    @property
    def labels(self) -> Dict[str, str]:
        """Get resource labels."""
        return self.metadata.get("labels") or {}

    @property
    def annotations(self) -> Dict[str, str]:
        """Get resource annotations."""
        return self.metadata.get("annotations") or {}

    def to_manifest(self) -> Dict[str, Any]:
        """Render the resource as a plain manifest dictionary."""
        data: Dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata,
        }
        if self.spec:
            data["spec"] = self.spec
        if self.status:
            data["status"] = self.status
        return data


class TrafficTarget(BaseModel):
    """A single routing rule of a service route."""

    tag: Optional[str] = None
    revision_name: Optional[str] = Field(None, alias="revisionName")
    latest_revision: Optional[bool] = Field(None, alias="latestRevision")
    percent: Optional[int] = Field(None, ge=0, le=100)
    url: Optional[str] = None

    class Config:
        populate_by_name = True
        frozen = True

    def to_manifest(self) -> Dict[str, Any]:
        """Render the target in re-appliable form (status-only fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"url"})


class ResolvedTarget(BaseModel):
    """A rendered traffic target and the revision it actually routes to."""

    target: TrafficTarget
    revision_name: str

    class Config:
        frozen = True

    @property
    def is_referencing(self) -> bool:
        """True when the target carries traffic or a tag."""
        return bool(self.target.percent) or bool(self.target.tag)


def _parse_targets(entries: Optional[List[Dict[str, Any]]], owner: str) -> List[TrafficTarget]:
    targets = []
    for entry in entries or []:
        try:
            targets.append(TrafficTarget.model_validate(entry))
        except ValidationError as e:
            raise MalformedInput(f"Invalid traffic target {entry!r} on {owner}: {e}") from e
    return targets


class Service(K8sResource):
    """Knative Service."""

    api_version: str = Field(SERVING_API_VERSION, alias="apiVersion")
    kind: str = "Service"

    @property
    def template(self) -> Dict[str, Any]:
        """Revision template of the service."""
        return (self.spec or {}).get("template") or {}

    @property
    def template_name(self) -> Optional[str]:
        """Name the template gives the revision it produces, if any."""
        return (self.template.get("metadata") or {}).get("name")

    @property
    def traffic(self) -> List[TrafficTarget]:
        """Declared traffic targets, in declaration order."""
        return _parse_targets((self.spec or {}).get("traffic"), f"service {self.name}")

    @property
    def status_traffic(self) -> List[TrafficTarget]:
        """Traffic targets as observed by the route controller."""
        return _parse_targets((self.status or {}).get("traffic"), f"service {self.name}")

    @property
    def latest_ready_revision_name(self) -> Optional[str]:
        return (self.status or {}).get("latestReadyRevisionName")

    @property
    def latest_created_revision_name(self) -> Optional[str]:
        return (self.status or {}).get("latestCreatedRevisionName")

    @property
    def current_revision_name(self) -> Optional[str]:
        """Revision the template currently targets."""
        return self.template_name or self.latest_created_revision_name

    @property
    def tag_mapping(self) -> Dict[str, str]:
        """Map of tag to revision name taken from the observed route."""
        return {
            target.tag: target.revision_name
            for target in self.status_traffic
            if target.tag and target.revision_name
        }


class Revision(K8sResource):
    """Knative Revision."""

    api_version: str = Field(SERVING_API_VERSION, alias="apiVersion")
    kind: str = "Revision"

    @property
    def generation(self) -> Optional[int]:
        """Configuration generation that produced this revision."""
        value = self.labels.get(CONFIGURATION_GENERATION_LABEL)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            raise MalformedInput(
                f"Revision {self.name} has a non-numeric {CONFIGURATION_GENERATION_LABEL} "
                f"label: {value!r}"
            )

    @property
    def creation_timestamp(self) -> str:
        return self.metadata.get("creationTimestamp") or ""

    @property
    def service_name(self) -> Optional[str]:
        return self.labels.get(SERVICE_LABEL)


class K8sList(BaseModel):
    """Generic ``v1/List`` container."""

    api_version: str = Field(LIST_API_VERSION, alias="apiVersion")
    kind: str = "List"
    items: List[Dict[str, Any]] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        frozen = True

    def to_manifest(self) -> Dict[str, Any]:
        return {"apiVersion": self.api_version, "kind": self.kind, "items": self.items}
