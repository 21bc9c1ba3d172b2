"""Manifest exporters."""

from .base import Exporter
from .yaml_exporter import YamlExporter
from .json_exporter import JsonExporter

__all__ = ["Exporter", "YamlExporter", "JsonExporter"]
