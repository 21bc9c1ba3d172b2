"""Core export functionality."""

from .assembler import ExportAssembler
from .exporter import ServiceExporter
from .history import RevisionHistoryReconstructor
from .normalizer import FieldNormalizer
from .traffic import TrafficResolver

__all__ = [
    "ExportAssembler",
    "ServiceExporter",
    "RevisionHistoryReconstructor",
    "FieldNormalizer",
    "TrafficResolver",
]
