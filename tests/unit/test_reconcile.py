"""Unit tests for the config decision table and its store-consulting wrapper."""

import pytest

from nvkind.config import ClusterConfig, NodeConfig
from nvkind.constants import NodeRole
from nvkind.errors import ConfigConflict, ConfigMissing, StoreInconsistent, StoreUnavailable
from nvkind.reconcile import ReconcileOutcome, reconcile, resolve_effective_config


def test_create_from_supplied_forces_name(sample_config):
    result = reconcile("other", sample_config, exists=False, stored=None)

    assert result.outcome is ReconcileOutcome.CREATE_FROM_SUPPLIED
    assert result.config.name == "other"
    assert result.needs_store_write
    assert sample_config.name == "gpu"


def test_nothing_to_create():
    with pytest.raises(ConfigMissing, match="does not exist"):
        reconcile("gpu", None, exists=False, stored=None)


def test_adopt_stored(sample_config):
    result = reconcile("gpu", None, exists=True, stored=sample_config)

    assert result.outcome is ReconcileOutcome.ADOPT_STORED
    assert result.config.matches(sample_config)
    assert not result.needs_store_write


def test_keep_supplied_when_equal(sample_config):
    supplied = sample_config.with_name("whatever")

    result = reconcile("gpu", supplied, exists=True, stored=sample_config)

    assert result.outcome is ReconcileOutcome.KEEP_SUPPLIED
    assert result.config.name == "gpu"
    assert not result.needs_store_write


def test_conflict_when_different(sample_config):
    supplied = sample_config.with_name("gpu")
    supplied.nodes.append(NodeConfig(role=NodeRole.WORKER))

    with pytest.raises(ConfigConflict, match="cannot pass new config to existing cluster"):
        reconcile("gpu", supplied, exists=True, stored=sample_config)


def test_node_drift_allowed_when_nodes_not_compared(sample_config):
    supplied = sample_config.with_name("gpu")
    supplied.nodes.append(NodeConfig(role=NodeRole.WORKER))

    result = reconcile("gpu", supplied, exists=True, stored=sample_config, compare_nodes=False)
    assert result.outcome is ReconcileOutcome.KEEP_SUPPLIED


def test_cluster_level_drift_rejected_when_nodes_not_compared(sample_config):
    supplied = ClusterConfig.model_validate({**sample_config.document(), "networking": {"ipFamily": "ipv6"}})

    with pytest.raises(ConfigConflict):
        reconcile("gpu", supplied, exists=True, stored=sample_config, compare_nodes=False)


@pytest.mark.parametrize("supplied", [None, ClusterConfig(name="gpu")])
def test_existing_cluster_without_record(supplied):
    with pytest.raises(StoreInconsistent, match="has no recorded config"):
        reconcile("gpu", supplied, exists=True, stored=None)


def test_wrapper_skips_store_for_new_cluster(sample_config, memory_store):
    result = resolve_effective_config("gpu", sample_config, {"other"}, memory_store)

    assert result.outcome is ReconcileOutcome.CREATE_FROM_SUPPLIED
    assert memory_store.reads == []


def test_wrapper_reads_store_for_existing_cluster(sample_config, memory_store):
    memory_store.records["gpu"] = sample_config.to_yaml()

    result = resolve_effective_config("gpu", None, {"gpu"}, memory_store)

    assert result.outcome is ReconcileOutcome.ADOPT_STORED
    assert memory_store.reads == ["gpu"]


def test_wrapper_maps_store_miss_to_inconsistent(memory_store):
    with pytest.raises(StoreInconsistent):
        resolve_effective_config("gpu", None, {"gpu"}, memory_store)


def test_wrapper_propagates_store_unavailable(sample_config):
    class DownStore:
        def read(self, name):
            raise StoreUnavailable("reading config of cluster 'gpu'", "connection refused")

    with pytest.raises(StoreUnavailable, match="connection refused"):
        resolve_effective_config("gpu", sample_config, {"gpu"}, DownStore())
