"""Base exporter class."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..model.export import ExportedManifest
from ..utils.logger import get_logger

logger = get_logger(__name__)


class Exporter(ABC):
    """Base class for manifest exporters."""

    @abstractmethod
    def render(self, manifest: ExportedManifest) -> str:
        """Render the manifest documents as text."""
        pass

    def export(self, manifest: ExportedManifest, path: Path) -> Path:
        """Write the rendered manifest to a file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write(self.render(manifest))

        logger.info(f"Exported {len(manifest.documents)} document(s) to {path}")
        return path
