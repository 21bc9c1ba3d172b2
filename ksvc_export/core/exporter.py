"""End-to-end service export pipeline."""

from typing import Optional, Sequence

from ..exporters import Exporter, JsonExporter, YamlExporter
from ..model.export import ExportedManifest, ExportFormat, ExportOptions, ManifestShape
from ..model.rules import NormalizationRules
from ..model.serving import Revision, Service
from ..utils.logger import get_logger
from .assembler import ExportAssembler
from .history import RevisionHistoryReconstructor
from .normalizer import FieldNormalizer
from .traffic import TrafficResolver

logger = get_logger(__name__)


class ServiceExporter:
    """Runs normalize, resolve, reconstruct and assemble for one service."""

    def __init__(self, rules: Optional[NormalizationRules] = None):
        self.normalizer = FieldNormalizer(rules)
        self.resolver = TrafficResolver()
        self.reconstructor = RevisionHistoryReconstructor(self.normalizer)
        self.assembler = ExportAssembler(self.reconstructor)

        # Dictionary mapping export formats to exporter classes
        self.exporter_registry = {
            ExportFormat.YAML: YamlExporter,
            ExportFormat.JSON: JsonExporter,
        }

    def export(
        self,
        service: Service,
        revisions: Optional[Sequence[Revision]] = None,
        options: Optional[ExportOptions] = None,
    ) -> ExportedManifest:
        """Build the manifest for a live service and its fetched revisions.

        ``revisions`` may be omitted for a service-only export; when given,
        every revision the route points at must be part of it.
        """
        options = options or ExportOptions()
        options.check_combination()

        if options.shape != ManifestShape.SERVICE and revisions is None:
            revisions = []

        logger.info(f"Exporting service {service.name} as {options.shape.value}")

        normalized = self.normalizer.normalize_service(service)
        resolved = self.resolver.resolve(
            normalized.traffic,
            service.latest_ready_revision_name,
            service.tag_mapping,
        )

        if revisions is not None:
            self.reconstructor.check_references(resolved, revisions)

        return self.assembler.assemble(
            normalized,
            resolved,
            options,
            revisions=revisions,
            current_revision=service.current_revision_name,
        )

    def get_exporter(self, output_format: ExportFormat) -> Exporter:
        exporter_class = self.exporter_registry.get(output_format, YamlExporter)
        return exporter_class()

    def render(self, manifest: ExportedManifest, output_format: ExportFormat) -> str:
        """Serialize an assembled manifest."""
        return self.get_exporter(output_format).render(manifest)
