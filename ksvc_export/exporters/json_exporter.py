"""JSON exporter."""

import json

from ..errors import UnsupportedCombination
from ..model.export import ExportedManifest
from .base import Exporter


class JsonExporter(Exporter):
    """Render a manifest as a single JSON document."""

    def render(self, manifest: ExportedManifest) -> str:
        if manifest.is_multi_document:
            raise UnsupportedCombination(
                f"A {manifest.shape.value} manifest holds {len(manifest.documents)} "
                "documents and cannot be rendered as a single JSON document"
            )
        document = manifest.documents[0] if manifest.documents else {}
        return json.dumps(document, indent=2) + "\n"
