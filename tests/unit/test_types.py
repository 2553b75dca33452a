"""Unit tests for spec schemas, settings and small models."""

import pytest
from marshmallow import ValidationError
from k8ssandra.common.models.key import ObjectKey
from k8ssandra.common.models.labels import Labels
from k8ssandra.common.models.result import ReconcileResult
from k8ssandra.types.schemas import (
    CassandraDatacenterTemplateSchema,
    K8ssandraClusterSpecSchema,
    RackSchema,
)
from k8ssandra.types.settings import Settings, _getbool
from k8ssandra.utils.errors import conflict_error, not_found_error
from k8ssandra.utils.helpers import canonicalize_dict, label_selector, merge_unique
from kubernetes_asyncio.client import ApiException
from tests.fakes import dc_template


class TestSchemas:
    def test_load_cluster_spec(self):
        spec = K8ssandraClusterSpecSchema().load(
            {
                "k8sContextsSecret": "contexts",
                "cassandra": {
                    "cluster": "demo",
                    "datacenters": [
                        dc_template("dc1", "east"),
                        dc_template("dc2", "west", racks=[{"name": "r1"}]),
                    ],
                },
            }
        )
        assert spec.k8s_contexts_secret == "contexts"
        assert spec.cassandra.cluster == "demo"
        assert [dc.name for dc in spec.cassandra.datacenters] == ["dc1", "dc2"]
        assert spec.cassandra.datacenters[1].k8s_context == "west"
        assert spec.cassandra.datacenters[1].racks[0].name == "r1"

    def test_rack_node_affinity_labels(self):
        template = CassandraDatacenterTemplateSchema().load(
            dc_template(
                "dc1",
                racks=[{"name": "r1", "nodeAffinityLabels": {"topology.kubernetes.io/zone": "a"}}],
            )
        )
        assert template.racks[0].node_affinity_labels == {"topology.kubernetes.io/zone": "a"}
        dumped = RackSchema(many=True).dump(template.racks)
        assert dumped == [
            {"name": "r1", "nodeAffinityLabels": {"topology.kubernetes.io/zone": "a"}}
        ]

    def test_rack_node_affinity_labels_must_be_strings(self):
        with pytest.raises(ValidationError):
            CassandraDatacenterTemplateSchema().load(
                dc_template("dc1", racks=[{"name": "r1", "nodeAffinityLabels": {"zone": 1}}])
            )

    def test_optional_fields_default_to_none(self):
        spec = K8ssandraClusterSpecSchema().load({})
        assert spec.k8s_contexts_secret is None
        assert spec.cassandra is None

    def test_datacenters_default_to_empty(self):
        spec = K8ssandraClusterSpecSchema().load({"cassandra": {"cluster": "demo"}})
        assert spec.cassandra.datacenters == []

    def test_template_namespace(self):
        template = CassandraDatacenterTemplateSchema().load(
            {"metadata": {"name": "dc1", "namespace": "ns"}, "size": 1, "serverVersion": "4.0.1"}
        )
        assert template.namespace_or("other") == "ns"
        template = CassandraDatacenterTemplateSchema().load(
            {"metadata": {"name": "dc1"}, "size": 1, "serverVersion": "4.0.1"}
        )
        assert template.namespace_or("other") == "other"

    @pytest.mark.parametrize(
        "data",
        [
            {"size": 3, "serverVersion": "4.0.1"},
            {"metadata": {"name": ""}, "size": 3, "serverVersion": "4.0.1"},
            {"metadata": {"name": "dc1"}, "size": 0, "serverVersion": "4.0.1"},
            {"metadata": {"name": "dc1"}, "size": 3},
        ],
    )
    def test_invalid_template(self, data):
        with pytest.raises(ValidationError):
            CassandraDatacenterTemplateSchema().load(data)


class TestSettings:
    def test_defaults(self):
        conf = Settings()
        assert conf.create_requeue_delay_seconds == 10
        assert conf.ready_requeue_delay_seconds == 15
        assert conf.max_seed_endpoints == 3
        assert conf.deduplicate_seeds is True
        assert conf.kubeconfig_secret_key == "kubeconfig"

    def test_overrides(self):
        conf = Settings(max_seed_endpoints=5, deduplicate_seeds=False)
        assert conf.max_seed_endpoints == 5
        assert conf.deduplicate_seeds is False
        assert Settings().max_seed_endpoints == 3

    @pytest.mark.parametrize(
        "value, expected",
        [("true", True), ("on", True), ("1", True), ("false", False), ("off", False), ("no", False)],
    )
    def test_boolean_flag_spellings(self, monkeypatch, value, expected):
        monkeypatch.setenv("DEDUPLICATE_SEEDS", value)
        assert _getbool("DEDUPLICATE_SEEDS", True) is expected

    def test_boolean_flag_default(self, monkeypatch):
        monkeypatch.delenv("DEDUPLICATE_SEEDS", raising=False)
        assert _getbool("DEDUPLICATE_SEEDS", True) is True

    def test_unknown_boolean_flag_is_rejected(self, monkeypatch):
        monkeypatch.setenv("DEDUPLICATE_SEEDS", "maybe")
        with pytest.raises(ValueError, match="DEDUPLICATE_SEEDS"):
            _getbool("DEDUPLICATE_SEEDS", True)


class TestReconcileResult:
    def test_done(self):
        result = ReconcileResult.done()
        assert result.is_done and not result.is_retry and not result.is_error
        assert result.requeue_after is None

    def test_retry_after(self):
        result = ReconcileResult.retry_after(10, reason="created")
        assert result.is_retry
        assert result.requeue_after == 10
        assert result.reason == "created"

    @pytest.mark.parametrize("seconds", [0, -1])
    def test_retry_after_requires_positive_delay(self, seconds):
        with pytest.raises(ValueError):
            ReconcileResult.retry_after(seconds)

    def test_failed(self):
        error = RuntimeError("boom")
        result = ReconcileResult.failed(error)
        assert result.is_error
        assert result.error is error
        assert result.reason == "boom"


class TestHelpers:
    def test_canonicalize_dict_sorts_nested_keys(self):
        a = {"b": {"y": 1, "x": [{"d": 1, "c": 2}]}, "a": 1}
        b = {"a": 1, "b": {"x": [{"c": 2, "d": 1}], "y": 1}}
        assert canonicalize_dict(a) == canonicalize_dict(b)

    def test_merge_unique_preserves_order(self):
        assert merge_unique(["a", "b"], ["c", "a", "d", "c"]) == ["a", "b", "c", "d"]
        assert merge_unique(None, ["a"]) == ["a"]

    def test_label_selector(self):
        assert label_selector({"a": "1", "b": "2"}) == "a=1,b=2"
        assert label_selector({}) is None

    def test_object_key_str(self):
        assert str(ObjectKey("ns", "dc1")) == "ns/dc1"

    def test_datacenter_pod_labels(self):
        assert Labels.datacenter_pods("dc1").as_dict() == {
            "cassandra.datastax.com/datacenter": "dc1"
        }


class TestErrors:
    def test_not_found(self):
        assert not_found_error(ApiException(status=404))
        assert not not_found_error(ApiException(status=500))
        assert not not_found_error(ValueError())

    def test_conflict(self):
        conflict = ApiException(status=409)
        conflict.body = '{"reason": "Conflict"}'
        exists = ApiException(status=409)
        exists.body = '{"reason": "AlreadyExists"}'
        assert conflict_error(conflict)
        assert not conflict_error(exists)
