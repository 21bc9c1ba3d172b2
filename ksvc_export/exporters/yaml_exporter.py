"""YAML exporter."""

import yaml

from ..model.export import ExportedManifest
from .base import Exporter

DOCUMENT_SEPARATOR = "---\n"


class YamlExporter(Exporter):
    """Render a manifest as a YAML document stream."""

    def render(self, manifest: ExportedManifest) -> str:
        rendered = [
            yaml.safe_dump(document, default_flow_style=False, sort_keys=False)
            for document in manifest.documents
        ]
        return DOCUMENT_SEPARATOR.join(rendered)
