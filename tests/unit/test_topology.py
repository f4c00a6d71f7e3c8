"""Unit tests for node role classification and topology resolution."""

import pytest

from nvkind.config import NodeConfig
from nvkind.constants import NodeRole
from nvkind.errors import TopologyMismatch, UnknownNodeRole
from nvkind.topology import classify_role, resolve_nodes

SHORT_TOKENS = {NodeRole.CONTROL_PLANE: "cp-", NodeRole.WORKER: "w-"}


@pytest.mark.parametrize(
    "name,role",
    [
        ("gpu-control-plane", NodeRole.CONTROL_PLANE),
        ("gpu-control-plane2", NodeRole.CONTROL_PLANE),
        ("gpu-worker", NodeRole.WORKER),
        ("gpu-worker2", NodeRole.WORKER),
        ("gpu-worker10", NodeRole.WORKER),
        ("worker-cluster-control-plane", NodeRole.CONTROL_PLANE),
    ],
)
def test_classify_kind_node_names(name, role):
    assert classify_role(name) is role


@pytest.mark.parametrize("name", ["gpu-external-load-balancer", "xyz-2", "123", ""])
def test_classify_unknown_role(name):
    with pytest.raises(UnknownNodeRole, match="unable to determine node role"):
        classify_role(name)


def test_resolve_pairs_by_sorted_position(cluster_context):
    """Test the w-1/cp-1/w-0 scenario with custom role tokens."""
    declared = [
        NodeConfig(role=NodeRole.CONTROL_PLANE, image="cp"),
        NodeConfig(role=NodeRole.WORKER, image="first-worker"),
        NodeConfig(role=NodeRole.WORKER, image="second-worker"),
    ]

    nodes = resolve_nodes(["w-1", "cp-1", "w-0"], declared, cluster_context, tokens=SHORT_TOKENS)

    assert [n.name for n in nodes] == ["cp-1", "w-0", "w-1"]
    assert [n.role for n in nodes] == [NodeRole.CONTROL_PLANE, NodeRole.WORKER, NodeRole.WORKER]
    assert [n.config.image for n in nodes] == ["cp", "first-worker", "second-worker"]


def test_resolve_kind_names(sample_config, cluster_context):
    """Test resolution against the names kind actually reports."""
    nodes = resolve_nodes(
        ["gpu-worker2", "gpu-control-plane", "gpu-worker"], sample_config.nodes, cluster_context,
    )

    assert [n.name for n in nodes] == ["gpu-control-plane", "gpu-worker", "gpu-worker2"]
    assert nodes[1].config.extra_mounts[0]["containerPath"].endswith("/0")
    assert nodes[2].config.extra_mounts[0]["containerPath"].endswith("/1")
    assert all(n.context is cluster_context for n in nodes)


def test_control_plane_first_regardless_of_sort(cluster_context):
    """Test that role groups are emitted in priority order, not name order."""
    declared = [NodeConfig(role=NodeRole.WORKER), NodeConfig(role=NodeRole.CONTROL_PLANE)]

    nodes = resolve_nodes(["a-worker", "z-control-plane"], declared, cluster_context)

    assert [n.name for n in nodes] == ["z-control-plane", "a-worker"]


def test_unknown_live_name_fails(cluster_context):
    declared = [NodeConfig(role=NodeRole.CONTROL_PLANE)]
    with pytest.raises(UnknownNodeRole):
        resolve_nodes(["cp-1", "xyz-2"], declared, cluster_context, tokens=SHORT_TOKENS)


def test_worker_count_mismatch_names_role(cluster_context):
    """Test that two live workers against one declared worker is fatal."""
    declared = [NodeConfig(role=NodeRole.CONTROL_PLANE), NodeConfig(role=NodeRole.WORKER)]

    with pytest.raises(TopologyMismatch, match="worker") as excinfo:
        resolve_nodes(["cp-0", "w-0", "w-1"], declared, cluster_context, tokens=SHORT_TOKENS)

    assert excinfo.value.role == "worker"
    assert excinfo.value.live == 2
    assert excinfo.value.declared == 1


def test_control_plane_mismatch_reported_first(cluster_context):
    declared = [NodeConfig(role=NodeRole.WORKER)]
    with pytest.raises(TopologyMismatch) as excinfo:
        resolve_nodes(["cp-0"], declared, cluster_context, tokens=SHORT_TOKENS)
    assert excinfo.value.role == "control-plane"


def test_absent_role_is_valid(cluster_context):
    """Test that zero live and zero declared nodes of a role is accepted."""
    declared = [NodeConfig(role=NodeRole.CONTROL_PLANE)]

    nodes = resolve_nodes(["gpu-control-plane"], declared, cluster_context)

    assert len(nodes) == 1
    assert nodes[0].role is NodeRole.CONTROL_PLANE


def test_no_nodes_at_all(cluster_context):
    assert resolve_nodes([], [], cluster_context) == []


def test_resolved_config_is_a_copy(sample_config, cluster_context):
    """Test that later config mutation does not reach resolved nodes."""
    nodes = resolve_nodes(
        ["gpu-control-plane", "gpu-worker", "gpu-worker2"], sample_config.nodes, cluster_context,
    )

    sample_config.nodes[0].image = "mutated"
    sample_config.nodes[1].extra_mounts[0]["hostPath"] = "/mutated"

    assert nodes[0].config.image == "kindest/node:v1.29.2"
    assert nodes[1].config.extra_mounts[0]["hostPath"] == "/dev/null"
