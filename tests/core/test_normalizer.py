"""Tests for the field normalizer."""

import pytest

from ksvc_export.core.normalizer import FieldNormalizer, prune_empty
from ksvc_export.model.rules import NormalizationRules
from ksvc_export.model.serving import Revision, Service


@pytest.mark.unit
class TestPruneEmpty:
    def test_removes_empty_values(self):
        """Test nulls and empty collections are removed recursively."""
        value = {"a": {}, "b": [], "c": None, "d": {"e": {"f": {}}}, "g": 0, "h": False}

        assert prune_empty(value) == {"g": 0, "h": False}

    def test_keeps_list_positions(self):
        """Test list items stay in place."""
        assert prune_empty([{"a": 1, "b": {}}, {}]) == [{"a": 1}, {}]


@pytest.mark.unit
class TestFieldNormalizer:
    def setup_method(self):
        """Set up test fixtures."""
        self.normalizer = FieldNormalizer()

    def test_service_metadata_is_stripped(self, single_revision_service):
        """Test cluster-assigned metadata and volatile annotations are dropped."""
        normalized = self.normalizer.normalize_service(single_revision_service)

        assert normalized.metadata == {"name": "hello"}
        assert normalized.status is None

    def test_service_template(self, single_revision_service):
        """Test the template is defaulted and pruned."""
        normalized = self.normalizer.normalize_service(single_revision_service)

        assert normalized.template == {
            "metadata": {"name": "hello-rev1"},
            "spec": {
                "containers": [
                    {
                        "name": "user-container",
                        "image": "gcr.io/knative-samples/helloworld-go",
                        "readinessProbe": {"successThreshold": 1, "tcpSocket": {"port": 0}},
                    }
                ],
                "containerConcurrency": 0,
                "timeoutSeconds": 300,
            },
        }

    def test_declared_route_is_kept(self, tagged_service):
        """Test the declared route is passed through for resolution."""
        normalized = self.normalizer.normalize_service(tagged_service)

        assert normalized.spec["traffic"] == tagged_service.spec["traffic"]

    def test_explicit_values_are_not_overwritten(self):
        """Test defaults apply only to unset values."""
        service = Service.model_validate(
            {
                "metadata": {"name": "hello"},
                "spec": {
                    "template": {
                        "spec": {
                            "containerConcurrency": 10,
                            "timeoutSeconds": 60,
                            "containers": [{"image": "img"}],
                        }
                    }
                },
            }
        )

        spec = self.normalizer.normalize_service(service).template["spec"]

        assert spec["containerConcurrency"] == 10
        assert spec["timeoutSeconds"] == 60

    def test_revision_keeps_creation_metadata(self, make_revision):
        """Test revision labels/annotations recorded at creation survive."""
        revision = make_revision(
            "hello-rev1", 1, annotations={"client.knative.dev/user-image": "img"}
        )

        normalized = self.normalizer.normalize_revision(revision)

        assert normalized.metadata == {
            "name": "hello-rev1",
            "labels": {
                "serving.knative.dev/configuration": "hello",
                "serving.knative.dev/configurationGeneration": "1",
                "serving.knative.dev/route": "hello",
                "serving.knative.dev/service": "hello",
            },
            "annotations": {
                "client.knative.dev/user-image": "img",
                "serving.knative.dev/creator": "kubernetes-admin",
            },
        }
        assert normalized.spec["containerConcurrency"] == 0
        assert normalized.spec["timeoutSeconds"] == 300
        assert normalized.status is None

    def test_labels_are_sorted(self):
        """Test label maps render in key order."""
        revision = Revision(metadata={"name": "r", "labels": {"b": "2", "a": "1"}})

        normalized = self.normalizer.normalize_revision(revision)

        assert list(normalized.labels) == ["a", "b"]

    def test_revision_without_spec_gets_defaults(self):
        """Test a bare revision still carries the platform defaults."""
        normalized = self.normalizer.normalize_revision(Revision(metadata={"name": "r"}))

        assert normalized.spec == {"containerConcurrency": 0, "timeoutSeconds": 300}

    def test_keep_namespace_rule(self, single_revision_service):
        """Test the namespace can be kept through the rules."""
        normalizer = FieldNormalizer(NormalizationRules(keep_namespace=True))

        normalized = normalizer.normalize_service(single_revision_service)

        assert normalized.namespace == "default"

    def test_custom_defaults(self):
        """Test defaults come from the rules."""
        normalizer = FieldNormalizer(NormalizationRules(default_timeout_seconds=900))

        normalized = normalizer.normalize_revision(Revision(metadata={"name": "r"}))

        assert normalized.spec["timeoutSeconds"] == 900

    def test_input_is_not_mutated(self, three_revision_service):
        """Test normalization is pure."""
        before = three_revision_service.model_dump()

        self.normalizer.normalize_service(three_revision_service)

        assert three_revision_service.model_dump() == before

    def test_service_normalization_is_idempotent(self, three_revision_service):
        """Test normalizing twice changes nothing."""
        once = self.normalizer.normalize_service(three_revision_service)
        twice = self.normalizer.normalize_service(once)

        assert twice == once
        assert twice.to_manifest() == once.to_manifest()

    def test_revision_normalization_is_idempotent(self, three_revision_history):
        """Test normalizing revisions twice changes nothing."""
        for revision in three_revision_history:
            once = self.normalizer.normalize_revision(revision)

            assert self.normalizer.normalize_revision(once) == once
