"""Test configuration and fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from ksvc_export.model.serving import Revision, Service

IMAGE = "gcr.io/knative-samples/helloworld-go"


def container(env: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    """User container the way the API server reports it."""
    data = {
        "name": "user-container",
        "image": IMAGE,
        "resources": {},
        "readinessProbe": {"successThreshold": 1, "tcpSocket": {"port": 0}},
    }
    if env:
        data["env"] = env
    return data


def live_revision(
    name: str,
    generation: int,
    env: Optional[List[Dict[str, str]]] = None,
    annotations: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Revision object carrying the metadata a cluster adds."""
    return {
        "apiVersion": "serving.knative.dev/v1",
        "kind": "Revision",
        "metadata": {
            "name": name,
            "namespace": "default",
            "uid": f"uid-{name}",
            "resourceVersion": str(1000 + generation),
            "generation": 1,
            "creationTimestamp": f"2024-01-0{generation}T12:00:00Z",
            "ownerReferences": [{"kind": "Configuration", "name": "hello"}],
            "labels": {
                "serving.knative.dev/configuration": "hello",
                "serving.knative.dev/configurationGeneration": str(generation),
                "serving.knative.dev/configurationUID": "uid-config",
                "serving.knative.dev/route": "hello",
                "serving.knative.dev/routingState": "active",
                "serving.knative.dev/service": "hello",
                "serving.knative.dev/serviceUID": "uid-hello",
            },
            "annotations": {
                "serving.knative.dev/creator": "kubernetes-admin",
                "serving.knative.dev/routingStateModified": "2024-01-01T12:00:00Z",
                **(annotations or {}),
            },
        },
        "spec": {
            "containerConcurrency": 0,
            "timeoutSeconds": 300,
            "containers": [container(env)],
        },
        "status": {"conditions": [{"type": "Ready", "status": "True"}]},
    }


def live_service(
    template_name: str,
    env: Optional[List[Dict[str, str]]] = None,
    traffic: Optional[List[Dict[str, Any]]] = None,
    status_traffic: Optional[List[Dict[str, Any]]] = None,
    latest_ready: Optional[str] = None,
) -> Dict[str, Any]:
    """Service object the way ``kubectl get ksvc -o json`` returns it."""
    latest_ready = latest_ready or template_name
    traffic = traffic if traffic is not None else [{"latestRevision": True, "percent": 100}]
    return {
        "apiVersion": "serving.knative.dev/v1",
        "kind": "Service",
        "metadata": {
            "name": "hello",
            "namespace": "default",
            "uid": "uid-hello",
            "resourceVersion": "2001",
            "generation": 3,
            "creationTimestamp": "2024-01-01T12:00:00Z",
            "managedFields": [{"manager": "kn", "operation": "Update"}],
            "annotations": {
                "serving.knative.dev/creator": "kubernetes-admin",
                "serving.knative.dev/lastModifier": "kubernetes-admin",
            },
        },
        "spec": {
            "template": {
                "metadata": {"name": template_name, "creationTimestamp": None},
                "spec": {"containers": [container(env)]},
            },
            "traffic": traffic,
        },
        "status": {
            "latestReadyRevisionName": latest_ready,
            "latestCreatedRevisionName": template_name,
            "traffic": status_traffic or [],
            "url": "http://hello.default.example.com",
        },
    }


ENV_REV2 = [{"name": "a", "value": "mouse"}]
ENV_REV3 = [{"name": "a", "value": "mouse"}, {"name": "b", "value": "cat"}]


@pytest.fixture
def single_revision_service():
    """Service ``hello`` with one revision taking all traffic."""
    return Service.model_validate(live_service("hello-rev1"))


@pytest.fixture
def single_revision_history():
    return [Revision.model_validate(live_revision("hello-rev1", 1))]


@pytest.fixture
def three_revision_service():
    """Traffic split 30/30/40 across rev1, rev2 and the latest rev3."""
    return Service.model_validate(
        live_service(
            "hello-rev3",
            env=ENV_REV3,
            traffic=[
                {"revisionName": "hello-rev1", "percent": 30},
                {"revisionName": "hello-rev2", "percent": 30},
                {"revisionName": "hello-rev3", "percent": 40},
            ],
        )
    )


@pytest.fixture
def three_revision_history():
    """Revisions deliberately out of chronological order."""
    return [
        Revision.model_validate(live_revision("hello-rev3", 3, env=ENV_REV3)),
        Revision.model_validate(
            live_revision("hello-rev1", 1, annotations={"client.knative.dev/user-image": IMAGE})
        ),
        Revision.model_validate(live_revision("hello-rev2", 2, env=ENV_REV2)),
    ]


@pytest.fixture
def tagged_service():
    """Latest rev2 takes all traffic, rev1 stays reachable through a tag."""
    return Service.model_validate(
        live_service(
            "hello-rev2",
            env=ENV_REV2,
            traffic=[
                {"latestRevision": True, "percent": 100},
                {"tag": "candidate", "revisionName": "hello-rev1", "percent": 0},
            ],
            status_traffic=[
                {"revisionName": "hello-rev2", "latestRevision": True, "percent": 100},
                {
                    "tag": "candidate",
                    "revisionName": "hello-rev1",
                    "latestRevision": False,
                    "percent": 0,
                    "url": "http://candidate-hello.default.example.com",
                },
            ],
        )
    )


@pytest.fixture
def two_revision_history():
    return [
        Revision.model_validate(live_revision("hello-rev2", 2, env=ENV_REV2)),
        Revision.model_validate(live_revision("hello-rev1", 1)),
    ]


@pytest.fixture
def raw_three_revision_objects():
    """Plain dictionaries, as saved to disk by ``kubectl get -o yaml``."""
    return {
        "service": live_service(
            "hello-rev3",
            env=ENV_REV3,
            traffic=[
                {"revisionName": "hello-rev1", "percent": 30},
                {"revisionName": "hello-rev2", "percent": 30},
                {"revisionName": "hello-rev3", "percent": 40},
            ],
        ),
        "revisions": [
            live_revision("hello-rev1", 1),
            live_revision("hello-rev2", 2, env=ENV_REV2),
            live_revision("hello-rev3", 3, env=ENV_REV3),
        ],
    }


@pytest.fixture
def make_service():
    """Builder for live service objects with custom routes."""

    def _make(*args, **kwargs) -> Service:
        return Service.model_validate(live_service(*args, **kwargs))

    return _make


@pytest.fixture
def make_revision():
    """Builder for live revision objects."""

    def _make(*args, **kwargs) -> Revision:
        return Revision.model_validate(live_revision(*args, **kwargs))

    return _make
