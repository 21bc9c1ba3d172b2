"""Portable export of Knative services and their revision history."""

__version__ = "0.1.0"
