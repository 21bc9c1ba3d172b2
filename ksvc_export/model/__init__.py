"""Data models for ksvc-export."""

from .export import ExportFormat, ExportMode, ExportOptions, ExportedManifest, ManifestShape
from .rules import NormalizationRules
from .serving import K8sList, K8sResource, ResolvedTarget, Revision, Service, TrafficTarget

__all__ = [
    "ExportFormat",
    "ExportMode",
    "ExportOptions",
    "ExportedManifest",
    "ManifestShape",
    "NormalizationRules",
    "K8sList",
    "K8sResource",
    "ResolvedTarget",
    "Revision",
    "Service",
    "TrafficTarget",
]
