"""Export manifest assembly."""

import copy
from typing import List, Optional, Sequence

from ..model.export import ExportedManifest, ExportOptions, ManifestShape
from ..model.serving import K8sList, ResolvedTarget, Revision, Service
from ..utils.logger import get_logger
from .history import RevisionHistoryReconstructor
from .traffic import route_manifest

logger = get_logger(__name__)


class ExportAssembler:
    """Composes normalized objects into one of the export shapes."""

    def __init__(self, reconstructor: Optional[RevisionHistoryReconstructor] = None):
        self.reconstructor = reconstructor or RevisionHistoryReconstructor()

    def assemble(
        self,
        service: Service,
        resolved: Sequence[ResolvedTarget],
        options: ExportOptions,
        revisions: Optional[Sequence[Revision]] = None,
        current_revision: Optional[str] = None,
    ) -> ExportedManifest:
        """Assemble the manifest for a normalized service and its resolved route."""
        revisions = revisions or []

        # Dictionary mapping manifest shapes to builder methods
        builders = {
            ManifestShape.SERVICE: lambda: self._service_only(service, resolved),
            ManifestShape.SERVICE_LIST: lambda: self._service_list(
                service, resolved, revisions, current_revision
            ),
            ManifestShape.SERVICE_WITH_REVISIONS: lambda: self._service_with_revisions(
                service, resolved, revisions
            ),
        }

        documents = builders[options.shape]()
        logger.info(f"Assembled {options.shape.value} manifest with {len(documents)} document(s)")
        return ExportedManifest(shape=options.shape, documents=documents)

    def routed_service(self, service: Service, resolved: Sequence[ResolvedTarget]) -> Service:
        """The service with its declared route replaced by the resolved one."""
        spec = copy.deepcopy(service.spec or {})
        spec.pop("traffic", None)
        if resolved:
            spec["traffic"] = route_manifest(resolved)
        return Service(
            api_version=service.api_version,
            kind=service.kind,
            metadata=copy.deepcopy(service.metadata),
            spec=spec,
        )

    def _service_only(self, service, resolved) -> List[dict]:
        return [self.routed_service(service, resolved).to_manifest()]

    def _service_list(self, service, resolved, revisions, current_revision) -> List[dict]:
        entries = self.reconstructor.reconstruct_services(
            service, resolved, revisions, current_revision
        )
        service_list = K8sList(items=[entry.to_manifest() for entry in entries])
        return [service_list.to_manifest()]

    def _service_with_revisions(self, service, resolved, revisions) -> List[dict]:
        documents = [self.routed_service(service, resolved).to_manifest()]
        history = self.reconstructor.reconstruct_revisions(revisions)
        if history:
            revision_list = K8sList(items=[revision.to_manifest() for revision in history])
            documents.append(revision_list.to_manifest())
        return documents
