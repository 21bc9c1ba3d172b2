"""Kubernetes interaction module."""

from .client import K8sClient
from .fetcher import FileSource, ServiceFetcher

__all__ = ["K8sClient", "FileSource", "ServiceFetcher"]
