"""Export-related models."""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ..errors import UnsupportedCombination


class ExportFormat(str, Enum):
    """Supported export formats."""

    YAML = "yaml"
    JSON = "json"


class ExportMode(str, Enum):
    """Shapes a service can be exported with its revisions."""

    KUBERNETES = "kubernetes"
    RESOURCES = "resources"


class ManifestShape(str, Enum):
    """Shape of an assembled manifest."""

    SERVICE = "service"
    SERVICE_LIST = "service-list"
    SERVICE_WITH_REVISIONS = "service-with-revisions"


# Formats able to hold several top-level documents in one stream
MULTI_DOCUMENT_FORMATS = {ExportFormat.YAML}


class ExportOptions(BaseModel):
    """What to export and how to render it."""

    with_revisions: bool = False
    mode: ExportMode = ExportMode.RESOURCES
    output_format: ExportFormat = ExportFormat.YAML

    class Config:
        frozen = True

    @property
    def shape(self) -> ManifestShape:
        """Manifest shape these options produce."""
        if not self.with_revisions:
            return ManifestShape.SERVICE
        if self.mode == ExportMode.KUBERNETES:
            return ManifestShape.SERVICE_LIST
        return ManifestShape.SERVICE_WITH_REVISIONS

    def check_combination(self) -> None:
        """Reject pairings that cannot be rendered faithfully."""
        if (
            self.shape == ManifestShape.SERVICE_WITH_REVISIONS
            and self.output_format not in MULTI_DOCUMENT_FORMATS
        ):
            raise UnsupportedCombination(
                f"--mode {self.mode.value} produces two documents and cannot be "
                f"rendered as {self.output_format.value}; use -o yaml or --mode kubernetes"
            )


class ExportedManifest(BaseModel):
    """Assembled export, ready for serialization."""

    shape: ManifestShape
    documents: List[Dict[str, Any]] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def is_multi_document(self) -> bool:
        return len(self.documents) > 1
