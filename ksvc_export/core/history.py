"""Revision history reconstruction."""

import copy
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from ..errors import ConsistencyFault, MalformedInput
from ..model.serving import ResolvedTarget, Revision, Service
from ..utils.logger import get_logger
from .normalizer import FieldNormalizer
from .traffic import route_manifest

logger = get_logger(__name__)


def _chronological_key(revision: Revision):
    generation = revision.generation
    return (
        generation is None,
        generation if generation is not None else 0,
        revision.creation_timestamp,
        revision.name,
    )


class RevisionHistoryReconstructor:
    """Rebuilds the revisions a service produced, oldest first."""

    def __init__(self, normalizer: Optional[FieldNormalizer] = None):
        self.normalizer = normalizer or FieldNormalizer()

    def order(self, revisions: Sequence[Revision]) -> List[Revision]:
        """Sort revisions by configuration generation, then creation time."""
        return sorted(revisions, key=_chronological_key)

    def check_references(
        self, resolved: Sequence[ResolvedTarget], revisions: Sequence[Revision]
    ) -> None:
        """Fail when the route points at revisions that were not fetched."""
        counts = Counter(revision.name for revision in revisions)
        duplicates = [name for name, count in counts.items() if count > 1]
        if duplicates:
            raise MalformedInput(f"Duplicate revisions in history: {', '.join(sorted(duplicates))}")

        known = {revision.name for revision in revisions}
        missing = []
        for entry in resolved:
            if entry.revision_name not in known and entry.revision_name not in missing:
                missing.append(entry.revision_name)
        if missing:
            raise ConsistencyFault(
                f"Route references revisions missing from the fetched history: {', '.join(missing)}"
            )

    def reconstruct_revisions(self, revisions: Sequence[Revision]) -> List[Revision]:
        """Every revision in the history with its creation-time metadata."""
        history = [self.normalizer.normalize_revision(r) for r in self.order(revisions)]
        logger.info(f"Reconstructed {len(history)} revision(s)")
        return history

    def reconstruct_services(
        self,
        service: Service,
        resolved: Sequence[ResolvedTarget],
        revisions: Sequence[Revision],
        current_revision: Optional[str] = None,
    ) -> List[Service]:
        """One service entry per referenced revision, replayable in order.

        ``service`` is the normalized service. Included are the revisions
        carrying traffic or a tag plus ``current_revision``, the one the
        template currently produces. Each entry routes only the targets that
        resolve to its own revision.
        """
        referenced = {entry.revision_name for entry in resolved if entry.is_referencing}
        if current_revision:
            referenced.add(current_revision)

        by_name = {revision.name: revision for revision in revisions}
        included = [r for r in self.order(revisions) if r.name in referenced]
        names = [r.name for r in included]
        if current_revision and current_revision not in by_name:
            # The template's revision has not been created yet; it replays last
            names.append(current_revision)

        entries = []
        for name in names:
            routes = [entry for entry in resolved if entry.revision_name == name]
            if name == current_revision:
                revision_spec = copy.deepcopy(service.template.get("spec") or {})
            else:
                revision_spec = self._spec_from_revision(by_name[name])
            metadata = copy.deepcopy(service.template.get("metadata") or {})
            metadata["name"] = name
            template = {"metadata": metadata, "spec": revision_spec}
            entries.append(self._service_entry(service, template, routes))

        logger.info(f"Reconstructed {len(entries)} service entries")
        return entries

    def _spec_from_revision(self, revision: Revision) -> Dict[str, Any]:
        return copy.deepcopy(self.normalizer.normalize_revision(revision).spec or {})

    @staticmethod
    def _service_entry(
        service: Service, template: Dict[str, Any], routes: Sequence[ResolvedTarget]
    ) -> Service:
        spec: Dict[str, Any] = {"template": template}
        if routes:
            spec["traffic"] = route_manifest(routes)
        return Service(
            api_version=service.api_version,
            kind=service.kind,
            metadata=copy.deepcopy(service.metadata),
            spec=spec,
        )
